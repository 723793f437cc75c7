"""Integration test fixtures.

Provides a fully wired AppState backed by a real cache file and the
FakeToolchain / doc-tree fixtures from tests/conftest.py.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from cargodocs.config import Settings
from cargodocs.state import AppState

if TYPE_CHECKING:
    from pathlib import Path

    from cargodocs.cache import DocCache
    from cargodocs.manager import DocManager


@pytest.fixture()
def app_state(cache: DocCache, toolchain, manager: DocManager, cache_path: Path) -> AppState:
    """Full AppState wired for handler tests."""
    return AppState(
        settings=Settings(cache={"path": str(cache_path)}),
        cache=cache,
        toolchain=toolchain,
        manager=manager,
    )


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport and an isolated cache file, and points cargo at a
    path that does not exist so no real toolchain is ever invoked.
    """
    env = os.environ.copy()
    env["CARGODOCS__SERVER__TRANSPORT"] = "stdio"
    env["CARGODOCS__CACHE__PATH"] = str(tmp_path / "wire-cache.json")
    env["CARGODOCS__TOOLCHAIN__CARGO_EXECUTABLE"] = str(tmp_path / "no-such-cargo")
    env["CARGODOCS__LOGGING__LEVEL"] = "WARNING"
    return env
