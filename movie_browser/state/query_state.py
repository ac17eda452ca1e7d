from enum import Enum
from typing import Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict
from ..schemas.movies_schemas import Category, Endpoint, QueryParams, RequestDescriptor


CATEGORY_ENDPOINTS = {
    Category.TRENDING.value: Endpoint.TRENDING,
    Category.POPULAR.value: Endpoint.POPULAR,
    Category.TOP_RATED.value: Endpoint.TOP_RATED,
}

Transition = Tuple['QueryState', RequestDescriptor]


class FetchPhase(str, Enum):
    IDLE = 'idle'
    LOADING = 'loading'


class QueryState(BaseModel):
    """
    Everything that decides which TMDB page is shown next.

    Instances are frozen: every transition returns a new state, and the
    browser session is the only holder of the current one.
    """
    model_config = ConfigDict(frozen=True)

    search_text: str = ''
    category: str = Category.TRENDING.value
    genre_id: Optional[int] = None
    page: int = 1
    total_pages: int = 1
    phase: FetchPhase = FetchPhase.IDLE

    @property
    def is_loading(self) -> bool:
        return self.phase == FetchPhase.LOADING

    @property
    def is_searching(self) -> bool:
        return bool(self.search_text)


def build_request(state: QueryState) -> RequestDescriptor:
    """
    Derive the outbound request for a state.

    Free-text search wins whenever search_text is non-empty; otherwise the
    category picks the listing, falling back to trending for anything
    unknown. A genre filter rides along on either path.

    :param state: Current query state.
    :return: RequestDescriptor with endpoint and query parameters.
    """
    params: QueryParams = {'page': state.page}
    if state.is_searching:
        endpoint = Endpoint.SEARCH
        params['query'] = state.search_text
    else:
        endpoint = CATEGORY_ENDPOINTS.get(state.category, Endpoint.TRENDING)

    if state.genre_id is not None:
        params['with_genres'] = state.genre_id

    return RequestDescriptor(endpoint=endpoint, params=params)


def _transition(state: QueryState, **changes) -> Transition:
    new_state = state.model_copy(update=changes)
    return new_state, build_request(new_state)


def set_search(state: QueryState, text: str) -> Transition:
    return _transition(state, search_text=(text or '').strip(), page=1)


def set_category(state: QueryState, category: Union[Category, str]) -> Transition:
    """Switch browsing category; leaves search mode and rewinds to page 1."""
    if isinstance(category, Category):
        category = category.value
    return _transition(state, category=category, search_text='', page=1)


def parse_genre_id(genre: Union[int, str, None]) -> Optional[int]:
    """
    Normalize a genre selector value. None and the empty string are the
    "all genres" sentinel.

    :raises ValueError: if the value is not a genre identifier.
    """
    if genre is None:
        return None
    if isinstance(genre, int):
        return genre
    genre = genre.strip()
    if not genre:
        return None
    return int(genre)


def set_genre(state: QueryState, genre: Union[int, str, None]) -> Transition:
    return _transition(state, genre_id=parse_genre_id(genre), page=1)


def set_page(state: QueryState, page: int) -> Transition:
    """
    Move the cursor to an explicit page, clamped to the known total.

    :raises ValueError: for pages below 1.
    """
    if page < 1:
        raise ValueError(f"page must be positive, got {page}")
    return _transition(state, page=min(page, state.total_pages))


# --- Fetch cycle: Idle -> Loading -> {Success, Failure} -> Idle ----------


def start_fetch(state: QueryState) -> Optional[QueryState]:
    """
    Enter Loading. Returns None when a fetch is already in flight; the
    caller must drop its request rather than queue it.
    """
    if state.is_loading:
        return None
    return state.model_copy(update={'phase': FetchPhase.LOADING})


def finish_fetch(state: QueryState, total_pages: int) -> QueryState:
    return state.model_copy(update={
        'phase': FetchPhase.IDLE,
        'total_pages': max(1, total_pages),
    })


def fail_fetch(state: QueryState) -> QueryState:
    return state.model_copy(update={'phase': FetchPhase.IDLE})
