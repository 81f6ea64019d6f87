"""
Error classification for Content API requests.

Every failure the fetch layer can produce is a CapiError tagged with an
ErrorKind, so callers decide what to do by looking at `kind` rather than
at the exception class:
- TRANSIENT: HTTP 503/504, worth retrying
- PERMANENT: any other non-200 status
- PARSE: a 200 response whose body does not match the expected schema
- TRANSPORT: the request never got a response (connect error, socket timeout)
"""

from __future__ import annotations

from enum import Enum

RETRYABLE_STATUS_CODES = frozenset({503, 504})
INVALID_BODY_PLACEHOLDER = "invalid UTF data"


class ErrorKind(str, Enum):
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    PARSE = "parse"
    TRANSPORT = "transport"


class CapiError(Exception):
    """A failed Content API request.

    Attributes:
        status_code: HTTP status code, or None when no response was received
        message: Response body text, or a description of the failure
        kind: Classification of the failure
        body: Raw response body text kept for diagnosis (parse errors)
    """

    def __init__(
        self,
        status_code: int | None,
        message: str,
        kind: ErrorKind,
        body: str | None = None,
    ):
        super().__init__(status_code, message)
        self.status_code = status_code
        self.message = message
        self.kind = kind
        self.body = body

    def __str__(self) -> str:
        if self.status_code is None:
            return f"CAPI {self.kind.value} error: {self.message}"
        return f"CAPI error {self.status_code}: {self.message}"

    def is_retryable(self) -> bool:
        return self.status_code in RETRYABLE_STATUS_CODES

    @classmethod
    def from_response(cls, status_code: int, body: bytes) -> CapiError:
        """Build an error from a non-200 response."""
        try:
            message = body.decode("utf-8")
        except UnicodeDecodeError:
            message = INVALID_BODY_PLACEHOLDER
        kind = ErrorKind.TRANSIENT if status_code in RETRYABLE_STATUS_CODES else ErrorKind.PERMANENT
        return cls(status_code, message, kind)

    @classmethod
    def parse_error(cls, status_code: int, reason: str, body: str) -> CapiError:
        return cls(status_code, f"could not parse response: {reason}", ErrorKind.PARSE, body=body)

    @classmethod
    def transport_error(cls, exc: Exception) -> CapiError:
        return cls(None, f"{type(exc).__name__}: {exc}", ErrorKind.TRANSPORT)


class RetriesExhaustedError(CapiError):
    """A transient error that was still failing when the attempt budget ran out.

    Carries the same status code, message and kind as the last error seen,
    so it can be handled like any other CapiError.
    """

    def __init__(self, last_error: CapiError, attempts: int):
        super().__init__(last_error.status_code, last_error.message, last_error.kind, last_error.body)
        self.last_error = last_error
        self.attempts = attempts

    def __str__(self) -> str:
        return f"{super().__str__()} (gave up after {self.attempts} attempts)"
