"""Symbol extraction from a rustdoc output tree.

rustdoc writes one page per item, named ``<kind>.<name>.html``, inside a
directory per module. Walking the tree and parsing filenames is enough to
enumerate a crate's public items without reading any HTML.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cargodocs import uri
from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.docs import SymbolInfo, SymbolKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from cargodocs.manager import DocManager

log = structlog.get_logger()

PATH_SEPARATOR = "::"
DOC_EXTENSION = ".html"
INDEX_FILE = "index.html"

# "src" mirrors the crate sources; "implementors" holds trait implementor
# listings. Neither contains item pages.
SKIP_DIRS = frozenset({"src", "implementors"})

_SYMBOL_FILE_RE = re.compile(
    r"^(" + "|".join(re.escape(kind.value) for kind in SymbolKind) + r")\.(.+)\.html$"
)


def parse_symbol_filename(filename: str) -> tuple[SymbolKind, str] | None:
    """Return ``(kind, name)`` for a rustdoc item page, else ``None``.

    Hyphens in the name stand in for path separators and are converted back
    to ``::``.
    """
    match = _SYMBOL_FILE_RE.match(filename)
    if match is None:
        return None
    kind, name = match.groups()
    return SymbolKind(kind), name.replace("-", PATH_SEPARATOR)


def qualified_path(crate_name: str, module_path: str, name: str) -> str:
    segments = [crate_name, module_path, name] if module_path else [crate_name, name]
    return PATH_SEPARATOR.join(segments)


def iter_doc_files(root: Path, module_path: str = "") -> Iterator[tuple[str, Path]]:
    """Yield ``(module_path, file)`` for every item-candidate page under root.

    Entries are visited in the order the filesystem reports them. Skipped
    directories are pruned at every depth; ``index.html`` files are never
    yielded.
    """
    with os.scandir(root) as entries:
        children = list(entries)

    for entry in children:
        if entry.is_dir():
            if entry.name in SKIP_DIRS:
                continue
            child_module = (
                f"{module_path}{PATH_SEPARATOR}{entry.name}" if module_path else entry.name
            )
            yield from iter_doc_files(Path(entry.path), child_module)
        elif entry.name.endswith(DOC_EXTENSION) and entry.name != INDEX_FILE:
            yield module_path, Path(entry.path)


def traverse(root: Path, crate_name: str) -> list[SymbolInfo]:
    """Collect every symbol under root, in filesystem order."""
    symbols: list[SymbolInfo] = []
    for module_path, file_path in iter_doc_files(root):
        parsed = parse_symbol_filename(file_path.name)
        if parsed is None:
            continue
        kind, name = parsed
        symbols.append(
            SymbolInfo(
                name=name,
                kind=kind,
                path=qualified_path(crate_name, module_path, name),
                uri=uri.create(str(file_path.absolute())),
            )
        )
    return symbols


async def list_symbols(
    manager: DocManager,
    project_path: str,
    crate_name: str,
) -> list[SymbolInfo]:
    """List a crate's symbols sorted by fully-qualified path."""
    doc_dir = await manager.require_doc_dir(project_path, crate_name)

    try:
        symbols = await asyncio.to_thread(traverse, doc_dir, crate_name)
    except OSError as exc:
        log.warning("symbol_listing_failed", crate_name=crate_name, exc_info=True)
        raise DocError(
            code=ErrorCode.SEARCH_FAILED,
            message="Failed to list symbols",
            suggestion="The documentation directory may have been removed; rebuild it.",
            recoverable=True,
            details=str(exc),
        ) from exc

    symbols.sort(key=lambda symbol: symbol.path)
    log.info("symbols_listed", crate_name=crate_name, count=len(symbols))
    return symbols
