from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of provider failure classes seen by the orchestration core."""

    MODEL_MISSING = "model_missing"
    TRANSIENT = "transient"
    ACCESS_DENIED = "access_denied"
    AUTHENTICATION = "authentication"
    FATAL = "fatal"

    @property
    def is_fatal(self) -> bool:
        return self in (ErrorKind.ACCESS_DENIED, ErrorKind.AUTHENTICATION, ErrorKind.FATAL)


class GenerationError(Exception):
    """Raised when a generative-model request fails."""


class ProviderError(GenerationError):
    """Raised by provider adapters with an already-classified failure kind."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.FATAL,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT


class CandidatesExhaustedError(GenerationError):
    """Raised when every candidate model failed with a non-fatal error."""

    def __init__(self, message: str, *, last_kind: ErrorKind, attempts: int) -> None:
        super().__init__(message)
        self.last_kind = last_kind
        self.attempts = attempts


_TRANSIENT_STATUSES = frozenset({429, 503})
_TRANSIENT_MARKERS = ("overloaded", "service unavailable", "unavailable", "resource_exhausted")
_MISSING_MARKERS = ("not found", "not_found")
_AUTH_MARKERS = ("api_key", "api key", "unauthenticated")
_DENIED_MARKERS = ("permission_denied", "permission denied", "billing")


def classify_provider_failure(status_code: int | None, message: str) -> ErrorKind:
    """Map a raw provider status/body to an ErrorKind.

    Status codes win over body markers. Body markers cover providers that
    report auth problems as 400 (Gemini's API_KEY_INVALID) or return
    overload errors without a status.
    """
    text = message.lower()
    if status_code == 404:
        return ErrorKind.MODEL_MISSING
    if status_code in _TRANSIENT_STATUSES:
        return ErrorKind.TRANSIENT
    if status_code == 401:
        return ErrorKind.AUTHENTICATION
    if status_code == 403:
        return ErrorKind.ACCESS_DENIED
    if any(marker in text for marker in _AUTH_MARKERS):
        return ErrorKind.AUTHENTICATION
    if any(marker in text for marker in _DENIED_MARKERS):
        return ErrorKind.ACCESS_DENIED
    if any(marker in text for marker in _TRANSIENT_MARKERS):
        return ErrorKind.TRANSIENT
    if any(marker in text for marker in _MISSING_MARKERS):
        return ErrorKind.MODEL_MISSING
    return ErrorKind.FATAL


USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MODEL_MISSING: (
        "AI service unavailable: No compatible models found. "
        "Please check your API configuration."
    ),
    ErrorKind.TRANSIENT: (
        "AI service temporarily unavailable: Please try again in a moment."
    ),
    ErrorKind.ACCESS_DENIED: (
        "AI service access denied: Please enable billing or check API permissions."
    ),
    ErrorKind.AUTHENTICATION: (
        "AI service authentication failed: Please check your API key configuration."
    ),
    ErrorKind.FATAL: "AI processing failed",
}
