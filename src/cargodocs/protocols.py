"""Protocol interfaces for swappable components.

The coordinator and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight fakes instead of a real cargo installation
- Other cache backends to be swapped in without changing tool code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cargodocs.models.cache import DocCacheEntry
    from cargodocs.toolchain import CommandResult


class CacheProtocol(Protocol):
    """Interface for the documentation build-status cache."""

    async def initialize(self) -> None: ...

    async def get(self, project_path: str, crate_name: str) -> DocCacheEntry | None: ...

    async def set(self, entry: DocCacheEntry) -> DocCacheEntry: ...

    async def remove(self, project_path: str, crate_name: str) -> None: ...

    async def purge_expired(self) -> int: ...


class ToolchainProtocol(Protocol):
    """Interface for the external documentation toolchain."""

    async def metadata(self, project_path: str) -> CommandResult: ...

    async def doc(self, project_path: str, crate_name: str) -> CommandResult: ...
