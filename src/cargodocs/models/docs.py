from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class SymbolKind(StrEnum):
    """Item kinds rustdoc encodes as the first segment of a page filename."""

    STRUCT = "struct"
    ENUM = "enum"
    TRAIT = "trait"
    FUNCTION = "fn"
    CONST = "const"
    TYPE = "type"
    MACRO = "macro"
    MODULE = "mod"


class SymbolInfo(BaseModel):
    """One documented item, derived from a page filename."""

    name: str  # "::"-separated, e.g. "Foo::Bar"
    kind: SymbolKind
    path: str  # crate + module path + name, e.g. "my_crate::io::Reader"
    uri: str  # rustdoc:// URI of the backing HTML file


class SearchResult(BaseModel):
    title: str
    uri: str
    snippet: str | None = None
    # Kept for output compatibility; local builds carry no version, so always None.
    crate_version: str | None = None


class SearchOptions(BaseModel):
    limit: int | None = None  # None collects every match in the tree
