"""KushRouter error taxonomy and HTTP status classification."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    AUTHENTICATION = "authentication"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


class KushRouterError(Exception):
    """Base error raised for every failed KushRouter call.

    ``kind`` drives the retry policy: authentication and credit failures are
    final, rate limits back off exponentially, everything else linearly.
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        details: Any | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.status = status
        self.code = code
        self.details = details
        self.cause = cause
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind in (ErrorKind.RATE_LIMIT, ErrorKind.GENERIC)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, status={self.status!r}, message={self.message!r})"


class AuthenticationError(KushRouterError):
    """401 – invalid API key."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Invalid API key", **kwargs: Any) -> None:
        kwargs.setdefault("status", 401)
        super().__init__(message, **kwargs)


class InsufficientCreditsError(KushRouterError):
    """402 – account balance exhausted; ``details`` carries the remediation payload."""

    kind = ErrorKind.INSUFFICIENT_CREDITS

    def __init__(self, message: str = "Insufficient credits", **kwargs: Any) -> None:
        kwargs.setdefault("status", 402)
        super().__init__(message, **kwargs)


class RateLimitError(KushRouterError):
    """429 – rate limit exceeded."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Rate limit exceeded", **kwargs: Any) -> None:
        kwargs.setdefault("status", 429)
        super().__init__(message, **kwargs)


class ConfigurationError(ValueError):
    """Invalid client configuration (missing key, bad timeout or attempt count)."""


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _error_fields(body: Any) -> tuple[str | None, str | None, Any | None]:
    """Pull ``(message, type, details)`` out of a provider error body."""
    if not isinstance(body, dict):
        return None, None, None
    err = body.get("error")
    if isinstance(err, str):
        return err or None, None, None
    if not isinstance(err, dict):
        return None, None, None
    message = err.get("message")
    code = err.get("type")
    return (
        message if isinstance(message, str) and message else None,
        code if isinstance(code, str) and code else None,
        err.get("details"),
    )


def classify(status: int, body: Any = None) -> KushRouterError:
    """Map a non-success HTTP status and its parsed body to a classified error."""
    message, code, details = _error_fields(body)
    if status == 401:
        return AuthenticationError(message or "Invalid API key", code=code)
    if status == 402:
        return InsufficientCreditsError(message or "Insufficient credits", code=code, details=details)
    if status == 429:
        return RateLimitError(message or "Rate limit exceeded", code=code)
    return KushRouterError(message or f"HTTP {status}", status=status, code=code, details=details)
