# src/core/errors.py — v1
"""Error taxonomy shared by both analysis stages.

Every externally visible failure is an AnalysisError carrying an ErrorKind
(dispatch key), a stable machine-readable ErrorCode and a human message.
The thin subclasses only pin the kind so call sites read naturally.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure family, mapped to an HTTP-equivalent status."""

    VALIDATION = "validation"
    EXTRACTION = "extraction"
    INVOCATION = "invocation"
    DATABASE = "database"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.EXTRACTION: 502,
    ErrorKind.INVOCATION: 502,
    ErrorKind.DATABASE: 503,
}


class ErrorCode(str, Enum):
    """Stable machine codes surfaced in response envelopes."""

    # Upload / request validation
    NO_FILE = "NO_FILE"
    INVALID_FILENAME = "INVALID_FILENAME"
    INVALID_EXTENSION = "INVALID_EXTENSION"
    INVALID_MIME_TYPE = "INVALID_MIME_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_FOOD_DATA = "INVALID_FOOD_DATA"
    MISSING_USER = "MISSING_USER"

    # Model output
    NO_JSON = "NO_JSON"
    INVALID_JSON = "INVALID_JSON"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"

    # Inference call
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    INFERENCE_FAILED = "INFERENCE_FAILED"

    # Profile store
    USER_HEALTH_FETCH_ERROR = "USER_HEALTH_FETCH_ERROR"


class AnalysisError(Exception):
    """Base error for the analysis core."""

    kind: ErrorKind = ErrorKind.INVOCATION

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        kind: ErrorKind | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if kind is not None:
            self.kind = kind
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return self.kind.http_status

    def to_dict(self) -> dict[str, Any]:
        """Return the error body used in failure envelopes."""
        return {
            "code": self.code.value,
            "message": self.message,
            "type": self.kind.value,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class ValidationError(AnalysisError):
    """Bad, oversized or disallowed input. User-correctable."""

    kind = ErrorKind.VALIDATION


class ExtractionError(AnalysisError):
    """Model output could not be turned into a structured payload."""

    kind = ErrorKind.EXTRACTION


class InvocationError(AnalysisError):
    """The inference call failed (timeout, connection, rate limit, other)."""

    kind = ErrorKind.INVOCATION

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        retry_kind: str | None = None,
        attempts: int = 1,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code, message, details=details)
        self.retry_kind = retry_kind
        self.attempts = attempts


class DatabaseError(AnalysisError):
    """Profile store failure."""

    kind = ErrorKind.DATABASE
