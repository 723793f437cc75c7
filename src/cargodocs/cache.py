"""JSON-file cache of documentation build status.

One JSON object maps ``"<projectPath>:<crateName>"`` to a ``DocCacheEntry``.
The whole store is read once by ``initialize()`` and rewritten after every
mutation. Mutations within one process are serialised by an ``asyncio.Lock``;
several server processes sharing the file race with a last-writer-wins
outcome.

Unlike lookups, persistence failures are fatal: they surface as
``CACHE_ERROR`` so a caller never believes a status was recorded when it was
not.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.cache import DocCacheEntry, cache_key

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

log = structlog.get_logger()

CACHE_TTL_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


class DocCache:
    """File-backed documentation cache implementing CacheProtocol."""

    def __init__(self, path: Path, clock: Callable[[], int] = now_ms) -> None:
        self._path = path
        self._clock = clock
        self._entries: dict[str, DocCacheEntry] = {}
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def initialize(self) -> None:
        """Load the store from disk and drop expired entries.

        A missing file starts an empty store. Any other read or parse failure
        raises ``CACHE_ERROR``.
        """
        try:
            raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except FileNotFoundError:
            log.info("cache_initialized_empty", path=str(self._path))
            self._entries = {}
            return
        except OSError as exc:
            raise _cache_error("Failed to initialize cache", exc) from exc

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("cache file must contain a JSON object")
            self._entries = {
                key: DocCacheEntry.model_validate(value) for key, value in data.items()
            }
        except (ValueError, ValidationError) as exc:
            raise _cache_error("Failed to initialize cache", exc) from exc

        removed = await self.purge_expired()
        log.info(
            "cache_loaded",
            path=str(self._path),
            entries=len(self._entries),
            expired_removed=removed,
        )

    async def get(self, project_path: str, crate_name: str) -> DocCacheEntry | None:
        """Return the live entry for a crate, or ``None``.

        An expired entry is deleted (and the store rewritten) before returning
        ``None``.
        """
        key = cache_key(project_path, crate_name)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry, self._clock()):
            async with self._lock:
                if key in self._entries:
                    entries = dict(self._entries)
                    del entries[key]
                    await self._commit(entries)
            log.debug("cache_entry_expired", key=key)
            return None

        return entry

    async def set(self, entry: DocCacheEntry) -> DocCacheEntry:
        """Upsert an entry, stamping ``last_build_time`` with the current time."""
        async with self._lock:
            stored = entry.model_copy(update={"last_build_time": self._clock()})
            await self._commit({**self._entries, stored.key: stored})
        log.debug("cache_entry_written", key=stored.key, is_built=stored.is_built)
        return stored

    async def remove(self, project_path: str, crate_name: str) -> None:
        key = cache_key(project_path, crate_name)
        async with self._lock:
            entries = dict(self._entries)
            if entries.pop(key, None) is not None:
                log.debug("cache_entry_removed", key=key)
            await self._commit(entries)

    async def purge_expired(self) -> int:
        """Delete every expired entry. Persists only when something changed."""
        async with self._lock:
            now = self._clock()
            entries = {
                key: entry
                for key, entry in self._entries.items()
                if not self._is_expired(entry, now)
            }
            removed = len(self._entries) - len(entries)
            if removed:
                await self._commit(entries)
                log.info("cache_cleanup_complete", removed=removed)
        return removed

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _is_expired(entry: DocCacheEntry, now: int) -> bool:
        return now - entry.last_build_time > CACHE_TTL_MS

    async def _commit(self, entries: dict[str, DocCacheEntry]) -> None:
        """Write entries to disk, then make them the live store.

        Callers hold ``self._lock``. On a write failure the live store is left
        untouched.
        """
        payload = json.dumps(
            {key: entry.model_dump(by_alias=True) for key, entry in entries.items()},
            indent=2,
        )
        try:
            await asyncio.to_thread(self._path.write_text, payload, encoding="utf-8")
        except OSError as exc:
            log.error("cache_write_error", path=str(self._path), exc_info=True)
            raise _cache_error("Failed to save cache", exc) from exc
        self._entries = entries


def _cache_error(message: str, exc: Exception) -> DocError:
    return DocError(
        code=ErrorCode.CACHE_ERROR,
        message=message,
        suggestion="Check that the cache file is readable, writable and valid JSON.",
        recoverable=False,
        details=str(exc),
    )
