from __future__ import annotations

from cargodocs.models.cache import DocCacheEntry
from cargodocs.models.docs import SearchOptions, SearchResult, SymbolInfo, SymbolKind
from cargodocs.models.tools import (
    BuildDocInput,
    BuildDocOutput,
    CheckDocStatusOutput,
    CrateInput,
    GetDocPathOutput,
    ListSymbolsInput,
    ListSymbolsOutput,
    ReadDocInput,
    ReadDocOutput,
    SearchDocInput,
    SearchDocOutput,
)

__all__ = [
    # cache
    "DocCacheEntry",
    # docs
    "SymbolKind",
    "SymbolInfo",
    "SearchResult",
    "SearchOptions",
    # tools
    "CrateInput",
    "BuildDocInput",
    "ListSymbolsInput",
    "SearchDocInput",
    "ReadDocInput",
    "CheckDocStatusOutput",
    "BuildDocOutput",
    "GetDocPathOutput",
    "ListSymbolsOutput",
    "SearchDocOutput",
    "ReadDocOutput",
]
