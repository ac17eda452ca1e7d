from enum import Enum
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict


GenreCatalog = Dict[int, str]
QueryParams = Dict[str, Union[int, str]]


class Endpoint(str, Enum):
    SEARCH = '/search/movie'
    TRENDING = '/trending/movie/week'
    POPULAR = '/movie/popular'
    TOP_RATED = '/movie/top_rated'
    GENRE_LIST = '/genre/movie/list'


class Category(str, Enum):
    TRENDING = 'trending'
    POPULAR = 'popular'
    TOP_RATED = 'top_rated'


class MovieSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    id: int
    title: str = ''
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    overview: Optional[str] = None
    vote_average: Optional[float] = None


class ResultPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[MovieSummary] = []
    total_pages: int = 1


class RequestDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    endpoint: Endpoint
    params: QueryParams


# --- View models ---------------------------------------------------------


class RatingBadge(BaseModel):
    label: str
    band: Literal['good', 'medium', 'poor', 'neutral']


class MovieCard(BaseModel):
    id: int
    title: str
    year: str
    poster_url: str
    fallback_poster_url: str
    rating: RatingBadge
    overview: str


class StatusBanner(BaseModel):
    kind: Literal['error', 'info'] = 'error'
    message: str
    dismissable: bool = True


class PaginationControls(BaseModel):
    page: int
    total_pages: int
    label: str
    prev_disabled: bool
    next_disabled: bool


class GenreOption(BaseModel):
    value: str
    label: str
    selected: bool = False


class ResultsView(BaseModel):
    search_text: str = ''
    category: str = Category.TRENDING.value
    genres: List[GenreOption] = []
    cards: List[MovieCard] = []
    placeholders: int = 0
    empty_message: Optional[str] = None
    status: Optional[StatusBanner] = None
    pagination: PaginationControls
