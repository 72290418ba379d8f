"""Observability helpers – logging configuration and secret redaction."""

from completion_gateway.obs.redaction import make_redactor, redact_headers, redact_value
from completion_gateway.obs.setup import RedactingFilter, configure_logging

__all__ = [
    "RedactingFilter",
    "configure_logging",
    "make_redactor",
    "redact_headers",
    "redact_value",
]
