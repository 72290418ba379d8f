"""Provider error taxonomy.

Every failure leaving the gateway is a :class:`GatewayError` tagged with one
:class:`ErrorKind`. Callers match on ``error.kind`` (for example to pick an
HTTP status) instead of catching a family of subclasses.
"""

from __future__ import annotations

import enum
import logging

import openai

from completion_gateway.obs.redaction import redact_value

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    INVALID_API_KEY = "invalid-api-key"
    RATE_LIMITED = "rate-limited"
    SERVICE_UNAVAILABLE = "service-unavailable"
    GENERIC_PROVIDER_ERROR = "generic-provider-error"
    UNEXPECTED_ERROR = "unexpected-error"


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

# Status codes with a fixed kind and message. Everything else is generic.
_STATUS_KINDS: dict[int, tuple[ErrorKind, str]] = {
    401: (ErrorKind.INVALID_API_KEY, "Invalid API key"),
    429: (ErrorKind.RATE_LIMITED, "Rate limit exceeded. Please try again later."),
    503: (ErrorKind.SERVICE_UNAVAILABLE, "OpenAI service is temporarily unavailable"),
}


class GatewayError(Exception):
    """A classified provider failure."""

    def __init__(self, kind: ErrorKind, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.value!r}, status_code={self.status_code})"


def _status_of(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    return None


def classify_error(value: object) -> GatewayError:
    """Translate anything raised by the provider call into a :class:`GatewayError`.

    The HTTP status carried by SDK errors selects the kind; other exceptions keep
    their message verbatim. A value that is not an exception at all is reported
    with a fixed message so its contents never leak to the caller.
    """
    if isinstance(value, GatewayError):
        return value

    if isinstance(value, openai.APIError):
        status = _status_of(value)
        if status in _STATUS_KINDS:
            kind, message = _STATUS_KINDS[status]
            return GatewayError(kind, message, status)
        message = value.message or "OpenAI API error occurred"
        return GatewayError(ErrorKind.GENERIC_PROVIDER_ERROR, message, status or 500)

    if isinstance(value, Exception):
        return GatewayError(ErrorKind.GENERIC_PROVIDER_ERROR, str(value))

    return GatewayError(ErrorKind.UNEXPECTED_ERROR, UNEXPECTED_ERROR_MESSAGE)


def log_and_classify(value: object, *, operation: str) -> GatewayError:
    """Log a provider failure with secrets redacted and return its classification."""
    error = classify_error(value)
    detail = redact_value(str(value)) if isinstance(value, BaseException) else type(value).__name__
    logger.error(
        "%s failed: kind=%s status=%s detail=%s",
        operation,
        error.kind.value,
        error.status_code,
        detail,
    )
    return error
