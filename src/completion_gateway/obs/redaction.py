"""Redaction utilities – keep provider credentials out of log records."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence

REDACTED = "[REDACTED]"

# Header names whose values are credentials.
_SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "api-key",
        "openai-organization",
        "openai-project",
        "x-api-key",
    }
)

# Patterns matched in free text such as SDK error messages.
_SECRET_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i)bearer\s+[A-Za-z0-9._~+/=-]{8,}"),
    re.compile(r"sk-(?:proj-|svcacct-|admin-)?[A-Za-z0-9_-]{20,}"),  # OpenAI-style API key
]


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of *headers* with credential entries masked."""
    return {k: REDACTED if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()}


def redact_value(value: str) -> str:
    """Replace known secret patterns in *value* with ``[REDACTED]``."""
    result = value
    for pat in _SECRET_PATTERNS:
        result = pat.sub(REDACTED, result)
    return result


def make_redactor(
    extra_patterns: Sequence[re.Pattern[str]] | None = None,
    *,
    secrets: Sequence[str] = (),
) -> Callable[[str], str]:
    """Build a redactor, optionally extending the default patterns.

    *secrets* are literal strings (for example the configured API key) that are
    masked wherever they appear, whatever their shape.
    """
    patterns = list(_SECRET_PATTERNS)
    if extra_patterns:
        patterns.extend(extra_patterns)
    patterns.extend(re.compile(re.escape(s)) for s in secrets if s)

    def _redact(value: str) -> str:
        result = value
        for pat in patterns:
            result = pat.sub(REDACTED, result)
        return result

    return _redact
