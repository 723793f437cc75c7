"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import cargodocs.tools.build_doc as t_build_doc
import cargodocs.tools.check_doc_status as t_check_status
import cargodocs.tools.get_crate_doc as t_get_crate_doc
import cargodocs.tools.get_doc_path as t_get_doc_path
import cargodocs.tools.list_symbols as t_list_symbols
import cargodocs.tools.read_doc as t_read_doc
import cargodocs.tools.search_doc as t_search_doc
from cargodocs import __version__
from cargodocs.cache import DocCache
from cargodocs.config import Settings
from cargodocs.errors import DocError
from cargodocs.manager import DocManager
from cargodocs.schedulers import run_cache_cleanup_scheduler
from cargodocs.state import AppState
from cargodocs.toolchain import Cargo
from cargodocs.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

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
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    """Wire the cache, toolchain and coordinator from settings."""
    cache = DocCache(Path(settings.cache.path).expanduser())
    toolchain = Cargo(settings.toolchain.cargo_executable)
    return AppState(
        settings=settings,
        cache=cache,
        toolchain=toolchain,
        manager=DocManager(cache, toolchain),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        transport=settings.server.transport,
    )

    state = build_state(settings)
    try:
        await state.manager.initialize()
    except DocError as exc:
        log.error("cache_initialization_failed", path=settings.cache.path, details=exc.details)
        raise

    cache_cleanup_task = asyncio.create_task(run_cache_cleanup_scheduler(state))

    log.info(
        "server_started",
        version=__version__,
        transport=settings.server.transport,
        cache_path=settings.cache.path,
    )

    try:
        yield state
    finally:
        cache_cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cache_cleanup_task
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("cargodocs", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: DocError) -> CallToolResult:
    """Convert a DocError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    """Await a handler, mapping DocError to a structured tool error."""
    try:
        return await call
    except DocError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


def _state(ctx: Context) -> AppState:
    return ctx.request_context.lifespan_context


@mcp.tool()
async def check_doc_status(project_path: str, crate_name: str, ctx: Context) -> object:
    """Check whether documentation for a crate has been built.

    project_path must be the absolute path of a Rust project (containing Cargo.toml).
    """
    return await _run_tool(
        "check_doc_status",
        t_check_status.handle(project_path, crate_name, _state(ctx)),
    )


@mcp.tool()
async def build_doc(
    project_path: str,
    crate_name: str,
    ctx: Context,
    skip_dependencies: bool = False,
) -> object:
    """Build documentation for a crate with `cargo doc --no-deps`."""
    return await _run_tool(
        "build_doc",
        t_build_doc.handle(project_path, crate_name, skip_dependencies, _state(ctx)),
    )


@mcp.tool()
async def get_crate_doc(
    project_path: str,
    crate_name: str,
    ctx: Context,
    offset: int = 1,
    limit: int = 2000,
) -> object:
    """Get a crate's main documentation page for understanding overall concepts and usage.

    Returns a heading map for the full page and a content window controlled by
    offset and limit.
    """
    return await _run_tool(
        "get_crate_doc",
        t_get_crate_doc.handle(project_path, crate_name, offset, limit, _state(ctx)),
    )


@mcp.tool()
async def list_symbols(
    project_path: str,
    crate_name: str,
    ctx: Context,
    kind: str | None = None,
) -> object:
    """List all symbols (structs, enums, traits, etc.) in a crate's documentation.

    Optionally filter by kind: struct, enum, trait, fn, const, type, macro, mod.
    """
    return await _run_tool(
        "list_symbols",
        t_list_symbols.handle(project_path, crate_name, kind, _state(ctx)),
    )


@mcp.tool()
async def search_doc(
    project_path: str,
    crate_name: str,
    query: str,
    ctx: Context,
    limit: int | None = None,
) -> object:
    """Search within a crate's documentation (case-insensitive keyword or symbol)."""
    return await _run_tool(
        "search_doc",
        t_search_doc.handle(project_path, crate_name, query, limit, _state(ctx)),
    )


@mcp.tool()
async def get_doc_path(project_path: str, crate_name: str, ctx: Context) -> object:
    """Return the cached documentation entry point for a crate, if known."""
    return await _run_tool(
        "get_doc_path",
        t_get_doc_path.handle(project_path, crate_name, _state(ctx)),
    )


@mcp.tool()
async def read_doc(uri: str, ctx: Context, offset: int = 1, limit: int = 2000) -> object:
    """Read a generated documentation page by its rustdoc:// URI as Markdown.

    URIs come from list_symbols and search_doc results. Use the heading map to
    find sections, then call again with offset to jump directly to them.
    """
    return await _run_tool(
        "read_doc",
        t_read_doc.handle(uri, offset, limit, _state(ctx)),
    )


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        _setup_logging(settings)
        run_http_server(mcp, settings)
        return

    mcp.run()


if __name__ == "__main__":
    main()
