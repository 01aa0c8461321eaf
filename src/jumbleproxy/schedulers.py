"""Background scheduler coroutine for preview cache cleanup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from jumbleproxy.state import AppState

log = structlog.get_logger()


async def run_cache_cleanup_scheduler(state: AppState) -> None:
    """Delete expired previews at startup and then on the configured interval.

    Runs until cancelled by the lifespan. A failed pass is logged and the
    loop carries on.
    """
    interval_seconds = state.settings.cache.cleanup_interval_minutes * 60

    while True:
        try:
            await state.cache.cleanup_expired()
        except Exception:
            log.warning("cache_cleanup_scheduler_error", exc_info=True)
        await asyncio.sleep(interval_seconds)
