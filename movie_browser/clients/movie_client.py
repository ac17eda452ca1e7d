from typing import Optional
import httpx
from loguru import logger
from ..config import settings
from ..exceptions import ConfigurationError, RemoteError, TransportError
from ..schemas.movies_schemas import (
    Endpoint,
    GenreCatalog,
    MovieSummary,
    QueryParams,
    ResultPage,
)


def _auth_headers(token: Optional[str]) -> dict:
    """
    Build the request headers for TMDB bearer authentication.

    :param token: TMDB read access token.
    :return: Header mapping.
    :raises ConfigurationError: if the token is missing or blank.
    """
    if not token or not token.strip():
        raise ConfigurationError()
    return {
        'Authorization': f"Bearer {token.strip()}",
        'Accept': 'application/json',
    }


async def fetch_json(
    client: httpx.AsyncClient,
    endpoint: Endpoint,
    params: Optional[QueryParams],
    token: Optional[str]
) -> dict:
    """
    Issue one authenticated GET against TMDB and return the parsed body.
    No retries and no caching: every failure is classified and raised.

    :param client: HTTP client for making API requests.
    :param endpoint: Logical TMDB endpoint to call.
    :param params: Query parameters (page, query, with_genres).
    :param token: TMDB bearer token.
    :return: The decoded JSON body.
    :raises ConfigurationError: token missing, nothing is sent.
    :raises RemoteError: TMDB answered with a non-2xx status.
    :raises TransportError: network failure or malformed JSON.
    """
    headers = _auth_headers(token)
    url = f"{settings.TMDB_BASE_URL}{endpoint.value}"
    logger.debug(f"GET {endpoint.value} params={params or {}}")

    try:
        resp = await client.get(url, params=params or {}, headers=headers)
    except httpx.RequestError as e:
        logger.warning(f"Request to {endpoint.value} failed: {e!r}")
        raise TransportError(f"Network error while calling TMDB: {e}") from e

    if not resp.is_success:
        logger.warning(
            f"TMDB answered {resp.status_code} {resp.reason_phrase} for {endpoint.value}")
        raise RemoteError(resp.status_code, resp.reason_phrase)

    try:
        return resp.json()
    except ValueError as e:
        raise TransportError(f"Malformed JSON from TMDB: {e}") from e


def clamp_total_pages(value: Optional[int]) -> int:
    """
    TMDB refuses pages past 500, so the reported total is capped there.
    A missing or zero total is treated as a single page.
    """
    return max(1, min(int(value or 1), settings.MAX_TOTAL_PAGES))


def parse_result_page(body: dict) -> ResultPage:
    """
    Map a TMDB listing body onto a ResultPage.

    :param body: Dictionary shaped as {results: [...], total_pages: int}.
    :return: ResultPage with the clamped total page count.
    """
    if not isinstance(body, dict):
        raise TransportError("Unexpected TMDB response shape")
    results = body.get('results') or []
    if not isinstance(results, list):
        raise TransportError("TMDB results is not a list")
    try:
        items = [MovieSummary.model_validate(item) for item in results]
        total_pages = clamp_total_pages(body.get('total_pages'))
    except (TypeError, ValueError) as e:
        raise TransportError(f"Unexpected TMDB listing body: {e}") from e
    return ResultPage(items=items, total_pages=total_pages)


async def fetch_page(
    client: httpx.AsyncClient,
    endpoint: Endpoint,
    params: Optional[QueryParams],
    token: Optional[str]
) -> ResultPage:
    """
    Fetch one page of a TMDB movie listing (search, trending, popular or
    top rated).

    :param client: HTTP client for making API requests.
    :param endpoint: Listing endpoint.
    :param params: Query parameters, page included.
    :param token: TMDB bearer token.
    :return: ResultPage for the requested page.
    """
    body = await fetch_json(client, endpoint, params, token)
    return parse_result_page(body)


async def fetch_genres(
    client: httpx.AsyncClient,
    token: Optional[str]
) -> GenreCatalog:
    """
    Fetch the TMDB movie genre list.

    :param client: HTTP client for making API requests.
    :param token: TMDB bearer token.
    :return: Dictionary mapping genre IDs to their names.
    """
    body = await fetch_json(client, Endpoint.GENRE_LIST, None, token)
    genres = body.get('genres') if isinstance(body, dict) else None
    if not isinstance(genres, list) or not all(isinstance(g, dict) for g in genres):
        raise TransportError("Unexpected TMDB genre list shape")
    try:
        return {int(g['id']): str(g['name'])
                for g in genres if 'id' in g and 'name' in g}
    except (TypeError, ValueError) as e:
        raise TransportError(f"Unexpected TMDB genre item: {e}") from e
