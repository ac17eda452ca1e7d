import asyncio
from contextlib import suppress
from typing import Optional, Union
import httpx
from loguru import logger
from .config import Settings, settings as default_settings
from .clients.movie_client import fetch_genres, fetch_page
from .exceptions import ConfigurationError, MovieBrowserError
from .schemas.movies_schemas import Category, GenreCatalog, ResultsView
from .state import query_state as qs
from .state.query_state import QueryState, Transition
from .utils import pagination
from .utils.debounce import AsyncioScheduler, Debouncer, Scheduler
from .utils.rendering import Outcome, render


class BrowserSession:
    """
    One user's browsing session: the single writer of the QueryState and
    GenreCatalog, and the place where input, fetches and rendering meet.

    Only one fetch may be in flight. A fetch triggered while another is
    loading is dropped, not queued.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: Optional[Settings] = None,
        scheduler: Optional[Scheduler] = None
    ):
        self.client = client
        self.config = config or default_settings
        self.state = QueryState()
        self.genres: GenreCatalog = {}
        self.outcome: Outcome = None
        self.view: ResultsView = render(self.state, None)
        self.debouncer = Debouncer(
            scheduler or AsyncioScheduler(),
            self._on_search_intent,
            delay=self.config.DEBOUNCE_MS / 1000,
        )
        self._search_task: Optional[asyncio.Task] = None

    @property
    def token(self) -> Optional[str]:
        return self.config.TMDB_TOKEN

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def _render(self) -> ResultsView:
        self.view = render(self.state, self.outcome, self.genres)
        return self.view

    # --- Startup ---------------------------------------------------------

    async def start(self) -> ResultsView:
        """
        Check the credential, load the genre catalog, then the first page.
        Without a token nothing is requested and the configuration error is
        shown straight away.
        """
        if not self.config.has_token:
            logger.error("TMDB token not configured; no data will be loaded")
            self.outcome = ConfigurationError()
            return self._render()

        await self.load_genres()
        return await self.load_movies()

    async def load_genres(self) -> GenreCatalog:
        try:
            self.genres = await fetch_genres(self.client, self.token)
            logger.info(f"Loaded {len(self.genres)} genres")
        except MovieBrowserError as e:
            # genre filtering is optional; browsing carries on without it
            logger.warning(f"Failed to load genres: {e}")
            self.genres = {}
        return self.genres

    # --- Fetch cycle -----------------------------------------------------

    async def load_movies(self) -> ResultsView:
        """
        Fetch and render the page described by the current state.

        Idle -> Loading -> Idle. Returns the current view untouched when a
        fetch is already in flight.
        """
        loading = qs.start_fetch(self.state)
        if loading is None:
            logger.debug("Fetch already in flight; request dropped")
            return self.view

        self.state = loading
        self.outcome = None
        self._render()

        request = qs.build_request(self.state)
        try:
            page = await fetch_page(
                self.client, request.endpoint, request.params, self.token)
        except MovieBrowserError as e:
            logger.error(f"Failed to load movies: {e}")
            self.state = qs.fail_fetch(self.state)
            self.outcome = e
        else:
            logger.info(
                f"Loaded {len(page.items)} movies from {request.endpoint.value} "
                f"(page {self.state.page} of {page.total_pages})")
            self.state = qs.finish_fetch(self.state, page.total_pages)
            self.outcome = page
        finally:
            if self.state.is_loading:
                self.state = qs.fail_fetch(self.state)
        return self._render()

    async def _apply(self, transition: Optional[Transition]) -> ResultsView:
        if transition is None:
            return self.view
        self.state, _ = transition
        return await self.load_movies()

    # --- User input --------------------------------------------------------

    async def search(self, text: str) -> ResultsView:
        return await self._apply(qs.set_search(self.state, text))

    async def change_category(self, category: Union[Category, str]) -> ResultsView:
        self.debouncer.cancel()
        return await self._apply(qs.set_category(self.state, category))

    async def change_genre(self, genre: Union[int, str, None]) -> ResultsView:
        return await self._apply(qs.set_genre(self.state, genre))

    async def next_page(self) -> ResultsView:
        return await self._apply(pagination.next_page(self.state))

    async def prev_page(self) -> ResultsView:
        return await self._apply(pagination.prev_page(self.state))

    def keystroke(self, text: str) -> None:
        """Feed raw search box input; the search runs once typing pauses."""
        self.debouncer.on_keystroke(text)

    def _on_search_intent(self, text: str) -> None:
        task = asyncio.ensure_future(self.search(text))
        task.add_done_callback(self._search_done)
        self._search_task = task

    def _search_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.opt(exception=error).error("Debounced search failed")

    async def wait_for_search(self) -> Optional[ResultsView]:
        """Await the search started by the last debounced intent, if any."""
        if self._search_task is None:
            return None
        return await self._search_task

    def dismiss_status(self) -> ResultsView:
        if isinstance(self.outcome, Exception):
            self.outcome = None
        return self._render()

    async def close(self) -> None:
        self.debouncer.cancel()
        task, self._search_task = self._search_task, None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
