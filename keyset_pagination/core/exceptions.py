"""Exception classes raised by the pagination core.

Every failure that crosses the pagination boundary is a ``PaginationError``
carrying one of four codes. Codec failures use ``CodecError`` internally and
are translated to ``INVALID_TOKEN`` (when decoding a caller-supplied cursor)
or ``UNEXPECTED_ERROR`` (everywhere else) by the orchestrator.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class AppException(Exception):
    """Base exception with RFC 7807 problem-details fields.

    Attributes:
        status_code: HTTP status code a web layer should respond with.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=400,
            detail="Page token does not match sort order",
            type="invalid-token",
            extra={"expected_sig": "1a2b3c4d"},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")

    def to_problem_details(self) -> dict[str, Any]:
        """Render the exception as an RFC 7807 problem-details mapping."""
        return {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
            **self.extra,
        }


class PaginationErrorCode(StrEnum):
    """Closed set of error kinds surfaced by the paginator."""

    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SORT = "INVALID_SORT"
    INVALID_LIMIT = "INVALID_LIMIT"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class PaginationError(AppException):
    """Raised for any pagination failure.

    Caller mistakes (bad limit, bad sorts, stale or forged cursors) map to
    400; anything else is ``UNEXPECTED_ERROR`` with the original failure
    chained as ``__cause__``.

    Example:
        raise PaginationError(
            "Cannot paginate without sorting",
            code=PaginationErrorCode.INVALID_SORT,
        )
    """

    def __init__(
        self,
        detail: str,
        code: PaginationErrorCode,
        *,
        cause: BaseException | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        status_code = 500 if code is PaginationErrorCode.UNEXPECTED_ERROR else 400
        super().__init__(
            status_code=status_code,
            detail=detail,
            type=code.value.lower().replace("_", "-"),
            extra=extra,
        )
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"PaginationError(code={self.code.value!r}, detail={self.detail!r})"


class CodecError(AppException):
    """Raised when a codec cannot encode or decode a value.

    Decoding failures never return partial or coerced data.
    """

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type="codec-error",
            extra=extra,
        )


class CodecCompositionError(CodecError):
    """Raised when adjacent codecs in a pipeline have mismatched types."""


class StashKeyError(CodecError):
    """Raised when a stash reference does not resolve to a stored value."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No stashed value for key {key!r}", extra={"key": key})
        self.key = key


__all__ = [
    "AppException",
    "CodecCompositionError",
    "CodecError",
    "PaginationError",
    "PaginationErrorCode",
    "StashKeyError",
]
