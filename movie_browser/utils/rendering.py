from html import escape
from typing import List, Optional, Union
from ..config import settings
from ..schemas.movies_schemas import (
    Category,
    GenreCatalog,
    GenreOption,
    MovieCard,
    MovieSummary,
    RatingBadge,
    ResultPage,
    ResultsView,
    StatusBanner,
)
from ..state.query_state import QueryState
from .pagination import controls

FALLBACK_POSTER = (
    'data:image/svg+xml,%3Csvg xmlns="http://www.w3.org/2000/svg" width="300" '
    'height="450" viewBox="0 0 300 450"%3E%3Crect fill="%23374151" width="300" '
    'height="450"/%3E%3Ctext x="50%25" y="50%25" text-anchor="middle" '
    'fill="%239CA3AF" font-size="18" font-family="sans-serif"%3ENo Poster'
    '%3C/text%3E%3C/svg%3E'
)
EMPTY_MESSAGE = 'No movies found'
EMPTY_HINT = 'Try adjusting your search or filters'
NO_OVERVIEW = 'No overview available.'
NO_YEAR = 'TBA'
ALL_GENRES = 'All Genres'

GOOD_THRESHOLD = 7.5
MEDIUM_THRESHOLD = 6.0

Outcome = Union[ResultPage, Exception, None]


def poster_url(poster_path: Optional[str]) -> str:
    if not poster_path:
        return FALLBACK_POSTER
    return f"{settings.TMDB_IMAGE_BASE}/w500{poster_path}"


def release_year(release_date: Optional[str]) -> str:
    """Year part of a TMDB 'YYYY-MM-DD' date, or TBA."""
    year = (release_date or '').split('-')[0].strip()
    return year if year.isdigit() else NO_YEAR


def rating_band(vote_average: float) -> str:
    if vote_average >= GOOD_THRESHOLD:
        return 'good'
    if vote_average >= MEDIUM_THRESHOLD:
        return 'medium'
    return 'poor'


def rating_badge(vote_average: Optional[float]) -> RatingBadge:
    # TMDB reports 0 for titles nobody has voted on yet
    if not vote_average:
        return RatingBadge(label='N/A', band='neutral')
    return RatingBadge(label=f"{vote_average:.1f}", band=rating_band(vote_average))


def truncate_overview(overview: Optional[str], limit: Optional[int] = None) -> str:
    """
    Clip an overview to the card's character budget, cutting at a word
    boundary and marking the cut with an ellipsis.
    """
    text = ' '.join((overview or '').split())
    if not text:
        return NO_OVERVIEW
    limit = settings.OVERVIEW_MAX_CHARS if limit is None else limit
    if len(text) <= limit:
        return text
    clipped = text[:limit].rsplit(' ', 1)[0] if ' ' in text[:limit] else text[:limit]
    return clipped.rstrip(' ,.;:') + '…'


def to_card(movie: MovieSummary) -> MovieCard:
    return MovieCard(
        id=movie.id,
        title=movie.title,
        year=release_year(movie.release_date),
        poster_url=poster_url(movie.poster_path),
        fallback_poster_url=FALLBACK_POSTER,
        rating=rating_badge(movie.vote_average),
        overview=truncate_overview(movie.overview),
    )


def genre_options(catalog: GenreCatalog, selected: Optional[int]) -> List[GenreOption]:
    options = [GenreOption(value='', label=ALL_GENRES, selected=selected is None)]
    options += [
        GenreOption(value=str(gid), label=name, selected=gid == selected)
        for gid, name in catalog.items()
    ]
    return options


def error_banner(error: Exception) -> StatusBanner:
    message = getattr(error, 'user_message', None) or str(error)
    return StatusBanner(kind='error', message=message)


def render(
    state: QueryState,
    outcome: Outcome,
    catalog: Optional[GenreCatalog] = None
) -> ResultsView:
    """
    Project the current state and the last fetch outcome into a view.

    - an exception gives a single error banner and an empty grid
    - no outcome while loading gives placeholder cards
    - an empty page gives the empty-state message, never a bare grid
    - otherwise one card per movie

    :param state: Current query state.
    :param outcome: ResultPage, the failure raised by the fetch, or None.
    :param catalog: Genre catalog for the genre selector.
    :return: ResultsView ready for to_html() or JSON.
    """
    view = ResultsView(
        search_text=state.search_text,
        category=state.category,
        genres=genre_options(catalog or {}, state.genre_id),
        pagination=controls(state),
    )
    if isinstance(outcome, Exception):
        view.status = error_banner(outcome)
    elif outcome is None:
        if state.is_loading:
            view.placeholders = settings.PLACEHOLDER_COUNT
    elif not outcome.items:
        view.empty_message = EMPTY_MESSAGE
    else:
        view.cards = [to_card(m) for m in outcome.items]
    return view


# --- Markup ----------------------------------------------------------------


def _card_html(card: MovieCard) -> str:
    fallback = escape(card.fallback_poster_url)
    return (
        '<div class="movie-card">'
        f'<img src="{escape(card.poster_url)}" alt="{escape(card.title)}" '
        f'loading="lazy" onerror="this.onerror=null;this.src=\'{fallback}\'"/>'
        f'<span class="rating rating-{card.rating.band}">{escape(card.rating.label)}</span>'
        f'<h3 title="{escape(card.title)}">{escape(card.title)}</h3>'
        f'<p class="year">{escape(card.year)}</p>'
        f'<p class="overview">{escape(card.overview)}</p>'
        '</div>'
    )


def _grid_html(view: ResultsView) -> str:
    if view.placeholders:
        return ''.join('<div class="movie-card skeleton"></div>'
                       for _ in range(view.placeholders))
    if view.empty_message:
        return (
            f'<div class="empty"><p>{escape(view.empty_message)}</p>'
            f'<p>{escape(EMPTY_HINT)}</p></div>'
        )
    return ''.join(_card_html(c) for c in view.cards)


def _status_html(view: ResultsView) -> str:
    if view.status is None:
        return '<div id="statusBar" class="hidden"></div>'
    return (
        f'<div id="statusBar" class="status status-{view.status.kind}">'
        f'<p>{escape(view.status.message)}</p>'
        + ('<form method="post" action="/status/dismiss"><button>Dismiss</button></form>'
           if view.status.dismissable else '')
        + '</div>'
    )


def _genre_select_html(view: ResultsView) -> str:
    options = ''.join(
        f'<option value="{escape(o.value)}"{" selected" if o.selected else ""}>'
        f'{escape(o.label)}</option>'
        for o in view.genres
    )
    return f'<select id="genreSelect" name="genre_id">{options}</select>'


def _category_select_html(view: ResultsView) -> str:
    options = ''.join(
        f'<option value="{c.value}"{" selected" if c.value == view.category else ""}>'
        f'{c.value.replace("_", " ").title()}</option>'
        for c in Category
    )
    return f'<select id="categorySelect" name="category">{options}</select>'


def _pagination_html(view: ResultsView) -> str:
    p = view.pagination
    prev_attr = ' disabled' if p.prev_disabled else ''
    next_attr = ' disabled' if p.next_disabled else ''
    return (
        '<nav class="pagination">'
        f'<form method="post" action="/page/prev"><button id="prevBtn"{prev_attr}>Previous</button></form>'
        f'<span id="pageInfo">{escape(p.label)}</span>'
        f'<form method="post" action="/page/next"><button id="nextBtn"{next_attr}>Next</button></form>'
        '</nav>'
    )


def to_html(view: ResultsView) -> str:
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8"><title>Movie Browser</title></head><body>'
        f'<input id="searchInput" type="search" value="{escape(view.search_text)}"/>'
        f'{_category_select_html(view)}'
        f'{_genre_select_html(view)}'
        f'{_status_html(view)}'
        f'<div id="moviesGrid">{_grid_html(view)}</div>'
        f'{_pagination_html(view)}'
        '</body></html>'
    )
