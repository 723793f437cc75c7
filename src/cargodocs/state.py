"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cargodocs.config import Settings
    from cargodocs.manager import DocManager
    from cargodocs.protocols import CacheProtocol, ToolchainProtocol


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    cache: CacheProtocol
    toolchain: ToolchainProtocol
    manager: DocManager
