"""Keyword search over a crate's generated documentation.

Matching is plain case-insensitive substring containment against the raw
page content. There is no ranking: results are ordered by title only.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from cargodocs import uri
from cargodocs.errors import DocError, ErrorCode
from cargodocs.indexer import iter_doc_files, parse_symbol_filename, qualified_path
from cargodocs.models.docs import SearchOptions, SearchResult
from cargodocs.reader import visible_text

if TYPE_CHECKING:
    from pathlib import Path

    from cargodocs.manager import DocManager

log = structlog.get_logger()

SNIPPET_CONTEXT_CHARS = 60
NO_SNIPPET = "..."


def make_snippet(content: str, query: str) -> str:
    """Return the visible text around the first match of query.

    Falls back to ``"..."`` when the query only occurs inside markup.
    """
    text = " ".join(visible_text(content).split())
    index = text.lower().find(query.lower())
    if index < 0:
        return NO_SNIPPET

    start = max(0, index - SNIPPET_CONTEXT_CHARS)
    end = min(len(text), index + len(query) + SNIPPET_CONTEXT_CHARS)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(text) else ""
    return f"{prefix}{text[start:end]}{suffix}"


def search_tree(
    root: Path,
    crate_name: str,
    query: str,
    limit: int | None = None,
) -> list[SearchResult]:
    """Scan every doc page under root for query. Returns unsorted results."""
    needle = query.lower()
    results: list[SearchResult] = []

    for module_path, file_path in iter_doc_files(root):
        content = file_path.read_text(encoding="utf-8", errors="replace")
        if needle not in content.lower():
            continue

        parsed = parse_symbol_filename(file_path.name)
        if parsed is not None:
            title = qualified_path(crate_name, module_path, parsed[1])
        else:
            title = file_path.name

        results.append(
            SearchResult(
                title=title,
                uri=uri.create(str(file_path.absolute())),
                snippet=make_snippet(content, query),
            )
        )
        if limit is not None and len(results) >= limit:
            break

    return results


async def search_docs(
    manager: DocManager,
    project_path: str,
    crate_name: str,
    query: str,
    options: SearchOptions | None = None,
) -> list[SearchResult]:
    """Search a built crate's documentation, returning results sorted by title."""
    options = options or SearchOptions()
    doc_dir = await manager.require_doc_dir(project_path, crate_name)

    try:
        results = await asyncio.to_thread(search_tree, doc_dir, crate_name, query, options.limit)
    except OSError as exc:
        log.warning("search_failed", crate_name=crate_name, exc_info=True)
        raise DocError(
            code=ErrorCode.SEARCH_FAILED,
            message="Failed to search documentation",
            suggestion="The documentation directory may have been removed; rebuild it.",
            recoverable=True,
            details=str(exc),
        ) from exc

    results.sort(key=lambda result: result.title)
    log.info("search_complete", crate_name=crate_name, query=query, count=len(results))
    return results
