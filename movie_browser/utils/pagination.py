from typing import Optional
from ..schemas.movies_schemas import PaginationControls
from ..state.query_state import QueryState, Transition, set_page


def can_go_next(state: QueryState) -> bool:
    return not state.is_loading and state.page < state.total_pages


def can_go_prev(state: QueryState) -> bool:
    return not state.is_loading and state.page > 1


def next_page(state: QueryState) -> Optional[Transition]:
    """
    Advance one page. Returns None (no-op) on the last known page or while
    a fetch is in flight.
    """
    if not can_go_next(state):
        return None
    return set_page(state, state.page + 1)


def prev_page(state: QueryState) -> Optional[Transition]:
    """Go back one page; None on page 1 or while a fetch is in flight."""
    if not can_go_prev(state):
        return None
    return set_page(state, state.page - 1)


def controls(state: QueryState) -> PaginationControls:
    return PaginationControls(
        page=state.page,
        total_pages=state.total_pages,
        label=f"Page {state.page} of {state.total_pages}",
        prev_disabled=not can_go_prev(state),
        next_disabled=not can_go_next(state),
    )
