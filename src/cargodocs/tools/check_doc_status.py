"""Tool handler for check_doc_status.

Receives AppState, delegates to DocManager, and returns a structured dict.
No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.tools import CheckDocStatusOutput, CrateInput

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(project_path: str, crate_name: str, state: AppState) -> dict:
    """Handle a check_doc_status tool call."""
    log = structlog.get_logger().bind(tool="check_doc_status", crate_name=crate_name)
    log.info("handler_called")

    try:
        validated = CrateInput(project_path=project_path, crate_name=crate_name)
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide an absolute project path and a valid crate name.",
            recoverable=False,
        ) from exc

    is_built = await state.manager.check_status(validated.project_path, validated.crate_name)
    entry = await state.manager.get_doc_path(validated.project_path, validated.crate_name)

    output = CheckDocStatusOutput(
        crate_name=validated.crate_name,
        project_path=validated.project_path,
        is_built=is_built,
        doc_path=entry.doc_path if entry is not None else None,
    )
    return output.model_dump(mode="json")
