"""Tool handler for build_doc.

Runs ``cargo doc`` through DocManager. No MCP or FastMCP imports;
server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.tools import BuildDocInput, BuildDocOutput

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(
    project_path: str,
    crate_name: str,
    skip_dependencies: bool,
    state: AppState,
) -> dict:
    """Handle a build_doc tool call."""
    log = structlog.get_logger().bind(tool="build_doc", crate_name=crate_name)
    log.info("handler_called")

    try:
        validated = BuildDocInput(
            project_path=project_path,
            crate_name=crate_name,
            skip_dependencies=skip_dependencies,
        )
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide an absolute project path and a valid crate name.",
            recoverable=False,
        ) from exc

    doc_path = await state.manager.build(
        validated.project_path,
        validated.crate_name,
        validated.skip_dependencies,
    )

    output = BuildDocOutput(
        crate_name=validated.crate_name,
        project_path=validated.project_path,
        doc_path=doc_path,
    )
    return output.model_dump(mode="json")
