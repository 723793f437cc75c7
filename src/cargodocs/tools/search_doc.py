"""Tool handler for search_doc.

No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.docs import SearchOptions
from cargodocs.models.tools import SearchDocInput, SearchDocOutput
from cargodocs.search import search_docs

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(
    project_path: str,
    crate_name: str,
    query: str,
    limit: int | None,
    state: AppState,
) -> dict:
    """Handle a search_doc tool call."""
    log = structlog.get_logger().bind(tool="search_doc", crate_name=crate_name, query=query)
    log.info("handler_called")

    search_settings = state.settings.search
    try:
        validated = SearchDocInput(
            project_path=project_path,
            crate_name=crate_name,
            query=query,
            limit=search_settings.default_limit if limit is None else limit,
        )
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide an absolute project path, a valid crate name, a non-empty query "
                "(max 500 chars) and limit >= 1."
            ),
            recoverable=False,
        ) from exc

    options = SearchOptions(limit=min(validated.limit, search_settings.max_limit))
    results = await search_docs(
        state.manager,
        validated.project_path,
        validated.crate_name,
        validated.query,
        options,
    )

    output = SearchDocOutput(
        crate_name=validated.crate_name,
        query=validated.query,
        count=len(results),
        results=results,
    )
    return output.model_dump(mode="json")
