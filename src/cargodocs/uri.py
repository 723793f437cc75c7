"""``rustdoc://`` URIs pointing at generated documentation files."""

from __future__ import annotations

from cargodocs.errors import DocError, ErrorCode

SCHEME = "rustdoc://"


def create(path: str) -> str:
    return f"{SCHEME}{path}"


def parse(uri: str) -> str:
    """Return the file path embedded in a ``rustdoc://`` URI."""
    if not uri.startswith(SCHEME):
        raise DocError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Invalid rustdoc URI format: {uri}",
            suggestion="Expected format: rustdoc://path/to/doc.html",
            recoverable=False,
        )
    return uri[len(SCHEME) :]
