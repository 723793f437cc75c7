"""Tool handler for get_doc_path.

Reports what the cache knows about a crate without invoking cargo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.tools import CrateInput, GetDocPathOutput

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(project_path: str, crate_name: str, state: AppState) -> dict:
    """Handle a get_doc_path tool call."""
    log = structlog.get_logger().bind(tool="get_doc_path", crate_name=crate_name)
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

    entry = await state.manager.get_doc_path(validated.project_path, validated.crate_name)
    if entry is None:
        log.info("cache_miss")
        output = GetDocPathOutput(crate_name=validated.crate_name, doc_path=None, is_built=False)
    else:
        output = GetDocPathOutput(
            crate_name=validated.crate_name,
            doc_path=entry.doc_path,
            is_built=entry.is_built,
        )
    return output.model_dump(mode="json")
