"""Tool handler for read_doc.

Loads a generated documentation page by ``rustdoc://`` URI, converts it to
Markdown, and returns a heading map plus a line window of the content.
No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cargodocs import uri as rustdoc_uri
from cargodocs.errors import DocError, ErrorCode
from cargodocs.indexer import DOC_EXTENSION
from cargodocs.models.tools import ReadDocInput, ReadDocOutput
from cargodocs.reader import html_to_markdown, parse_headings

if TYPE_CHECKING:
    from cargodocs.state import AppState


async def handle(uri: str, offset: int, limit: int, state: AppState) -> dict:
    """Handle a read_doc tool call."""
    log = structlog.get_logger().bind(tool="read_doc", uri=uri)
    log.info("handler_called")

    try:
        validated = ReadDocInput(uri=uri, offset=offset, limit=limit)
    except ValueError as exc:
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a rustdoc:// URI, offset >= 1, limit >= 1.",
            recoverable=False,
        ) from exc

    path = Path(rustdoc_uri.parse(validated.uri))
    # rustdoc only emits .html pages; anything else is not documentation.
    if path.suffix != DOC_EXTENSION:
        log.warning("read_blocked", reason="not_a_doc_page")
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Not a documentation page: {validated.uri}",
            suggestion="Use a rustdoc:// URI returned by list_symbols or search_doc.",
            recoverable=False,
        )
    content = await load_markdown(path)
    return build_output(
        uri=validated.uri,
        content=content,
        offset=validated.offset,
        limit=validated.limit,
    )


async def load_markdown(path: Path) -> str:
    """Read a documentation page from disk and convert it to Markdown."""
    try:
        html = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise DocError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Unable to access documentation file: {path}",
            suggestion="The page may have been removed; rebuild the documentation.",
            recoverable=True,
            details=str(exc),
        ) from exc
    except OSError as exc:
        raise DocError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Unable to access documentation file: {path}",
            suggestion="Check that the URI points at a readable file.",
            recoverable=False,
            details=str(exc),
        ) from exc

    return html_to_markdown(html)


def build_output(*, uri: str, content: str, offset: int, limit: int) -> dict:
    """Apply line windowing and build the output dict."""
    all_lines = content.splitlines()

    # Window: offset is 1-based
    windowed = all_lines[offset - 1 : offset - 1 + limit]

    output = ReadDocOutput(
        uri=uri,
        headings=parse_headings(content),
        total_lines=len(all_lines),
        offset=offset,
        limit=limit,
        content="\n".join(windowed),
    )
    return output.model_dump(mode="json")
