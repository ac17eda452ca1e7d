from movie_browser.state import query_state as qs
from movie_browser.state.query_state import FetchPhase, QueryState
from movie_browser.utils import pagination


def test_prev_is_noop_on_first_page():
    assert pagination.prev_page(QueryState(page=1, total_pages=5)) is None


def test_next_is_noop_on_last_page():
    assert pagination.next_page(QueryState(page=5, total_pages=5)) is None


def test_next_and_prev_move_one_page():
    state, request = pagination.next_page(QueryState(page=2, total_pages=5))
    assert state.page == 3
    assert request.params['page'] == 3

    state, request = pagination.prev_page(state)
    assert state.page == 2


def test_navigation_disabled_while_loading():
    loading = QueryState(page=2, total_pages=5, phase=FetchPhase.LOADING)
    assert pagination.next_page(loading) is None
    assert pagination.prev_page(loading) is None

    ctl = pagination.controls(loading)
    assert ctl.prev_disabled and ctl.next_disabled


def test_walk_never_leaves_bounds():
    state = QueryState(total_pages=3)
    for _ in range(10):
        moved = pagination.next_page(state)
        if moved is None:
            break
        state = moved[0]
    assert state.page == 3
    for _ in range(10):
        moved = pagination.prev_page(state)
        if moved is None:
            break
        state = moved[0]
    assert state.page == 1


def test_controls_reflect_bounds():
    first = pagination.controls(QueryState(page=1, total_pages=2))
    assert first.prev_disabled and not first.next_disabled
    assert first.label == 'Page 1 of 2'

    last = pagination.controls(qs.finish_fetch(QueryState(page=2), 2))
    assert not last.prev_disabled and last.next_disabled
