"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from decide2watch.api.genres import router as genres_router
from decide2watch.api.tournament import router as tournament_router
from decide2watch.config import Settings
from decide2watch.core.tournament import TournamentController
from decide2watch.services.tmdb import TmdbClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: open the shared TMDB connection pool. Shutdown: close it."""
    settings: Settings = app.state.settings
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.tmdb_timeout_seconds))
    app.state.tmdb = TmdbClient.from_settings(settings, http_client=http_client)

    if settings.tmdb_api_key_set():
        logger.info("tmdb_client_ready base_url=%s", settings.tmdb_base_url)
    else:
        logger.warning("tmdb_api_key_missing brackets_cannot_load=true")

    yield

    await http_client.aclose()
    logger.info("tmdb_client_closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the decide2watch FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.decide2watch_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="decide2watch",
        version="0.1.0",
        description="Pick something to watch by running a single-elimination bracket",
        docs_url="/docs" if settings.decide2watch_env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    # One tournament per app instance; it is not shared across processes.
    app.state.tournament = TournamentController()

    app.include_router(tournament_router)
    app.include_router(genres_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.decide2watch_env}

    return app


app = create_app()
