"""Initialise logging for processes that embed the gateway."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from completion_gateway.obs.redaction import make_redactor

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RedactingFilter(logging.Filter):
    """Rewrite each record's rendered message through a redactor."""

    def __init__(self, redactor: Callable[[str], str]) -> None:
        super().__init__()
        self._redact = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._redact(record.getMessage())
        record.args = None
        return True


def _installed_handler(pkg_logger: logging.Logger) -> logging.Handler | None:
    for handler in pkg_logger.handlers:
        if any(isinstance(f, RedactingFilter) for f in handler.filters):
            return handler
    return None


def configure_logging(
    level: int | str = logging.INFO,
    *,
    secrets: Sequence[str] = (),
) -> logging.Handler:
    """Attach a stderr handler with secret redaction to the package logger.

    Calling it again updates the level and redacted secrets of the handler
    already installed instead of adding another one. Returns that handler so
    callers (and tests) can remove it again.
    """
    pkg_logger = logging.getLogger("completion_gateway")
    pkg_logger.setLevel(level)
    redacting = RedactingFilter(make_redactor(secrets=secrets))

    handler = _installed_handler(pkg_logger)
    if handler is not None:
        for f in [f for f in handler.filters if isinstance(f, RedactingFilter)]:
            handler.removeFilter(f)
        handler.addFilter(redacting)
        return handler

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler.addFilter(redacting)
    pkg_logger.addHandler(handler)
    return handler
