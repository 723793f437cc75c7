"""Background scheduler coroutine for cache cleanup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError

if TYPE_CHECKING:
    from cargodocs.state import AppState

log = structlog.get_logger()


async def run_cache_cleanup_scheduler(state: AppState) -> None:
    """Purge expired cache entries periodically (HTTP mode only).

    Startup purging already happens in ``DocCache.initialize``; stdio sessions
    are short-lived and rely on lazy expiry in ``get`` after that.
    """
    if state.settings.server.transport != "http":
        return

    interval_seconds = state.settings.cache.cleanup_interval_hours * 3600
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await state.cache.purge_expired()
        except DocError:
            log.warning("cache_cleanup_scheduler_error", exc_info=True)
