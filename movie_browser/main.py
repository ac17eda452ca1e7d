from contextlib import asynccontextmanager
from typing import Optional
import httpx
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from loguru import logger
from .config import settings
from .log_config import configure_logging
from .schemas.movies_schemas import Category, ResultsView
from .session import BrowserSession
from .state.query_state import parse_genre_id
from .utils.rendering import to_html


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as client:
        session = BrowserSession(client, settings)
        app.state.session = session
        await session.start()
        logger.info("Movie browser session started")
        yield
        await session.close()


app = FastAPI(title="Movie Browser", lifespan=lifespan)


def get_session(request: Request) -> BrowserSession:
    return request.app.state.session


@app.get('/', response_class=HTMLResponse)
async def index(session: BrowserSession = Depends(get_session)):
    return to_html(session.view)


@app.get('/view', response_model=ResultsView)
async def current_view(session: BrowserSession = Depends(get_session)):
    return session.view


@app.post('/search', response_model=ResultsView)
async def search(q: str = '', session: BrowserSession = Depends(get_session)):
    return await session.search(q)


@app.post('/keystroke', status_code=202)
async def keystroke(q: str = '', session: BrowserSession = Depends(get_session)):
    session.keystroke(q)
    return {'accepted': True}


@app.post('/category/{category}', response_model=ResultsView)
async def change_category(category: Category, session: BrowserSession = Depends(get_session)):
    return await session.change_category(category)


@app.post('/genre', response_model=ResultsView)
async def change_genre(
    genre_id: Optional[str] = None,
    session: BrowserSession = Depends(get_session)
):
    try:
        genre = parse_genre_id(genre_id)
    except ValueError:
        raise HTTPException(
            status_code=422, detail=f"Invalid genre id: {genre_id!r}")
    return await session.change_genre(genre)


@app.post('/page/next', response_model=ResultsView)
async def next_page(session: BrowserSession = Depends(get_session)):
    return await session.next_page()


@app.post('/page/prev', response_model=ResultsView)
async def prev_page(session: BrowserSession = Depends(get_session)):
    return await session.prev_page()


@app.post('/status/dismiss', response_model=ResultsView)
async def dismiss_status(session: BrowserSession = Depends(get_session)):
    return session.dismiss_status()


@app.get('/health')
async def health():
    return {'status': 'ok', 'configured': settings.has_token}
