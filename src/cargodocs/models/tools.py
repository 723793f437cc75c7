"""Input and output models for the MCP tool handlers."""

from __future__ import annotations

import re
from pathlib import PurePath

from pydantic import BaseModel, Field, field_validator

from cargodocs.models.docs import SearchResult, SymbolInfo, SymbolKind

_CRATE_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_-]*$")

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class CrateInput(BaseModel):
    project_path: str
    crate_name: str

    @field_validator("project_path")
    @classmethod
    def validate_project_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("project_path must not be empty")
        if not PurePath(v).is_absolute():
            raise ValueError(f"project_path must be an absolute path, got {v!r}")
        return v

    @field_validator("crate_name")
    @classmethod
    def validate_crate_name(cls, v: str) -> str:
        v = v.strip()
        if not _CRATE_NAME_RE.match(v):
            raise ValueError(f"Invalid crate name: {v!r}")
        return v


class BuildDocInput(CrateInput):
    # Accepted for compatibility; --no-deps is always passed to cargo doc.
    skip_dependencies: bool = False


class ListSymbolsInput(CrateInput):
    kind: SymbolKind | None = None


class SearchDocInput(CrateInput):
    query: str
    limit: int = Field(ge=1)

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be empty")
        if len(v) > 500:
            raise ValueError("query must be at most 500 characters")
        return v


class ReadDocInput(BaseModel):
    uri: str = Field(max_length=4096)
    offset: int = Field(default=1, ge=1)
    limit: int = Field(default=2000, ge=1)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class CheckDocStatusOutput(BaseModel):
    crate_name: str
    project_path: str
    is_built: bool
    doc_path: str | None


class BuildDocOutput(BaseModel):
    crate_name: str
    project_path: str
    doc_path: str


class GetDocPathOutput(BaseModel):
    crate_name: str
    doc_path: str | None
    is_built: bool


class ListSymbolsOutput(BaseModel):
    crate_name: str
    count: int
    symbols: list[SymbolInfo]


class SearchDocOutput(BaseModel):
    crate_name: str
    query: str
    count: int
    results: list[SearchResult]


class ReadDocOutput(BaseModel):
    uri: str
    headings: str  # Plain-text heading map: "<line>: <heading>\n..."
    total_lines: int
    offset: int
    limit: int
    content: str  # Windowed Markdown content
