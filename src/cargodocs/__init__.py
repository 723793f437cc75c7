"""cargodocs: MCP server for locally built Rust API documentation."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cargodocs")
except PackageNotFoundError:
    # Source-tree execution without installed package metadata.
    warnings.warn(
        "Package metadata for 'cargodocs' not found; using fallback version '0.0.0+unknown'.",
        RuntimeWarning,
        stacklevel=2,
    )
    __version__ = "0.0.0+unknown"
