import httpx
import pytest

from movie_browser.clients import movie_client as mc
from movie_browser.config import settings
from movie_browser.exceptions import ConfigurationError, RemoteError, TransportError
from movie_browser.schemas.movies_schemas import Endpoint


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def no_network_client():
    class Dummy:
        async def get(self, *args, **kwargs):
            raise AssertionError("no request should be sent")
    return Dummy()


# --- credential ---


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "   "])
async def test_missing_token_fails_before_any_request(no_network_client, token):
    with pytest.raises(ConfigurationError) as exc:
        await mc.fetch_page(no_network_client, Endpoint.TRENDING, {'page': 1}, token)
    assert "credential not configured" in str(exc.value)


@pytest.mark.asyncio
async def test_bearer_token_and_params_are_sent():
    seen = {}

    def handler(request):
        seen['auth'] = request.headers['Authorization']
        seen['path'] = request.url.path
        seen['params'] = dict(request.url.params)
        return httpx.Response(200, json={'results': [], 'total_pages': 1})

    async with mock_client(handler) as client:
        await mc.fetch_page(client, Endpoint.SEARCH,
                            {'page': 2, 'query': 'dune', 'with_genres': 878}, 'abc')

    assert seen['auth'] == 'Bearer abc'
    assert seen['path'].endswith('/search/movie')
    assert seen['params'] == {'page': '2', 'query': 'dune', 'with_genres': '878'}


# --- success ---


@pytest.mark.asyncio
async def test_fetch_page_maps_results():
    body = {
        'page': 1,
        'total_pages': 7,
        'results': [
            {'id': 1, 'title': 'Dune', 'release_date': '2021-09-15',
             'poster_path': '/d.jpg', 'overview': 'Sand.', 'vote_average': 7.8,
             'genre_ids': [878]},
            {'id': 2, 'title': 'Untitled'},
        ],
    }

    async with mock_client(lambda request: httpx.Response(200, json=body)) as client:
        page = await mc.fetch_page(client, Endpoint.POPULAR, {'page': 1}, 'tok')

    assert page.total_pages == 7
    assert [m.title for m in page.items] == ['Dune', 'Untitled']
    assert page.items[0].vote_average == 7.8
    assert page.items[1].poster_path is None


@pytest.mark.asyncio
async def test_total_pages_clamped_to_service_limit():
    body = {'results': [], 'total_pages': 10000}
    async with mock_client(lambda request: httpx.Response(200, json=body)) as client:
        page = await mc.fetch_page(client, Endpoint.TRENDING, {'page': 1}, 'tok')
    assert page.total_pages == settings.MAX_TOTAL_PAGES == 500


def test_missing_or_zero_total_pages_is_one_page():
    assert mc.parse_result_page({'results': []}).total_pages == 1
    assert mc.parse_result_page({'results': [], 'total_pages': 0}).total_pages == 1


@pytest.mark.asyncio
async def test_fetch_genres_returns_mapping():
    def handler(request):
        assert request.url.path.endswith('/genre/movie/list')
        return httpx.Response(200, json={'genres': [
            {'id': 28, 'name': 'Action'}, {'id': 35, 'name': 'Comedy'}]})

    async with mock_client(handler) as client:
        genres = await mc.fetch_genres(client, 'tok')
    assert genres == {28: 'Action', 35: 'Comedy'}


# --- failures ---


@pytest.mark.asyncio
async def test_non_2xx_raises_remote_error_with_status():
    async with mock_client(lambda request: httpx.Response(401)) as client:
        with pytest.raises(RemoteError) as exc:
            await mc.fetch_page(client, Endpoint.TRENDING, {'page': 1}, 'bad')
    assert exc.value.status == 401
    assert exc.value.status_text == 'Unauthorized'
    assert str(exc.value) == 'TMDB API Error: 401 Unauthorized'


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(TransportError):
            await mc.fetch_page(client, Endpoint.TRENDING, {'page': 1}, 'tok')


@pytest.mark.asyncio
async def test_malformed_json_raises_transport_error():
    def handler(request):
        return httpx.Response(200, content=b'<html>not json</html>')

    async with mock_client(handler) as client:
        with pytest.raises(TransportError):
            await mc.fetch_page(client, Endpoint.TRENDING, {'page': 1}, 'tok')


def test_result_item_without_id_is_transport_error():
    with pytest.raises(TransportError):
        mc.parse_result_page({'results': [{'title': 'No id'}], 'total_pages': 1})


# --- badly shaped bodies ---


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {'genres': None},
    {'genres': 'Action'},
    {'genres': [28, 35]},
    {'genres': [{'id': 'not-a-number', 'name': 'Action'}]},
    ['Action'],
])
async def test_malformed_genre_list_raises_transport_error(body):
    async with mock_client(lambda request: httpx.Response(200, json=body)) as client:
        with pytest.raises(TransportError):
            await mc.fetch_genres(client, 'tok')


@pytest.mark.parametrize("body", [
    {'results': [], 'total_pages': 'many'},
    {'results': [], 'total_pages': [3]},
    {'results': 5, 'total_pages': 1},
    {'results': ['not a movie'], 'total_pages': 1},
])
def test_badly_typed_listing_body_is_transport_error(body):
    with pytest.raises(TransportError):
        mc.parse_result_page(body)
