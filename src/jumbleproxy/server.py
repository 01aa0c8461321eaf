"""HTTP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the Starlette lifespan context manager
- Build the ASGI application (``create_app``) with the single proxy route
- Start uvicorn with a bounded graceful-shutdown window
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.routing import Route

from jumbleproxy import __version__
from jumbleproxy.cache import PreviewCache
from jumbleproxy.config import Settings
from jumbleproxy.dispatcher import dispatch
from jumbleproxy.forwarder import Forwarder, build_forward_http_client
from jumbleproxy.github import GitHubClient, build_github_http_client
from jumbleproxy.resolver import PreviewResolver
from jumbleproxy.schedulers import run_cache_cleanup_scheduler
from jumbleproxy.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings: Settings = app.state.settings

    log.info("server_starting", version=__version__)

    github_http_client = build_github_http_client(settings.github)
    forward_http_client = build_forward_http_client(settings.forwarder)

    db_path = settings.cache.db_path
    if db_path != ":memory:":
        Path(db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
        db_path = str(Path(db_path).expanduser())
    db = await aiosqlite.connect(db_path)
    cache = PreviewCache(db)
    await cache.init_db()

    state = AppState(
        settings=settings,
        cache=cache,
        resolver=PreviewResolver(GitHubClient(github_http_client)),
        forwarder=Forwarder(forward_http_client),
    )
    app.state.proxy = state

    cache_cleanup_task = asyncio.create_task(run_cache_cleanup_scheduler(state))

    log.info(
        "server_started",
        version=__version__,
        host=settings.server.host,
        port=settings.server.port,
        github_auth=settings.github.token is not None,
    )

    try:
        yield
    finally:
        log.info("server_stopping")
        cache_cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cache_cleanup_task
        await forward_http_client.aclose()
        await github_http_client.aclose()
        await db.close()


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None, *, state: AppState | None = None) -> Starlette:
    """Build the ASGI application.

    With ``state`` given, the app uses it as-is and runs no lifespan; this is
    how tests wire in-memory caches and mocked upstreams.
    """
    if settings is None:
        settings = state.settings if state is not None else Settings()

    app = Starlette(
        routes=[Route("/sites/{site:path}", dispatch, methods=["GET"])],
        lifespan=None if state is not None else lifespan,
    )
    app.state.settings = settings
    if state is not None:
        app.state.proxy = state
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    _setup_logging(settings)

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        timeout_graceful_shutdown=settings.server.shutdown_grace_seconds,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )


if __name__ == "__main__":
    main()
