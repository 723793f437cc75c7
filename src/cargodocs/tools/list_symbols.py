"""Tool handler for list_symbols.

No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.indexer import list_symbols
from cargodocs.models.tools import ListSymbolsInput, ListSymbolsOutput

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(
    project_path: str,
    crate_name: str,
    kind: str | None,
    state: AppState,
) -> dict:
    """Handle a list_symbols tool call."""
    log = structlog.get_logger().bind(tool="list_symbols", crate_name=crate_name)
    log.info("handler_called")

    try:
        validated = ListSymbolsInput(project_path=project_path, crate_name=crate_name, kind=kind)
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide an absolute project path, a valid crate name and optionally a kind "
                "(struct, enum, trait, fn, const, type, macro, mod)."
            ),
            recoverable=False,
        ) from exc

    symbols = await list_symbols(state.manager, validated.project_path, validated.crate_name)
    if validated.kind is not None:
        symbols = [symbol for symbol in symbols if symbol.kind == validated.kind]

    output = ListSymbolsOutput(
        crate_name=validated.crate_name,
        count=len(symbols),
        symbols=symbols,
    )
    return output.model_dump(mode="json")
