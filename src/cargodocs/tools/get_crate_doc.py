"""Tool handler for get_crate_doc.

Returns the crate's top-level documentation page (its ``index.html``) as a
windowed Markdown read. Documentation must already be built.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cargodocs import uri as rustdoc_uri
from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.tools import CrateInput, ReadDocInput
from cargodocs.tools.read_doc import build_output, load_markdown

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(
    project_path: str,
    crate_name: str,
    offset: int,
    limit: int,
    state: AppState,
) -> dict:
    """Handle a get_crate_doc tool call."""
    log = structlog.get_logger().bind(tool="get_crate_doc", crate_name=crate_name)
    log.info("handler_called")

    try:
        validated = CrateInput(project_path=project_path, crate_name=crate_name)
        window = ReadDocInput(uri="", offset=offset, limit=limit)
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide an absolute project path, a valid crate name, offset >= 1, limit >= 1."
            ),
            recoverable=False,
        ) from exc

    doc_dir = await state.manager.require_doc_dir(validated.project_path, validated.crate_name)
    entry = await state.manager.get_doc_path(validated.project_path, validated.crate_name)
    index_path = Path(entry.doc_path) if entry is not None else doc_dir / "index.html"

    content = await load_markdown(index_path)
    return build_output(
        uri=rustdoc_uri.create(str(index_path)),
        content=content,
        offset=window.offset,
        limit=window.limit,
    )
