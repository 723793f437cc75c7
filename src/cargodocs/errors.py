from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_PATH = "INVALID_PATH"
    BUILD_FAILED = "BUILD_FAILED"
    SEARCH_FAILED = "SEARCH_FAILED"
    CACHE_ERROR = "CACHE_ERROR"
    TOOLCHAIN_ERROR = "TOOLCHAIN_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"


class DocError(Exception):
    """Raised by the core and tool handlers for all expected failure conditions.

    Caught by server.py and serialised into the MCP error response.
    Never catch this inside business logic; let it propagate to the
    MCP layer so the agent receives a structured error with a suggestion.

    ``details`` carries diagnostic text from the originating cause (for
    example cargo's stderr); the cause itself is chained with ``raise ... from``.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
        details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
                "details": self.details,
            }
        }
