"""
Logging setup with request context propagation.
"""

import logging
import sys
from contextvars import ContextVar

from .types import RequestContext

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "pdfsmith_request_context", default=None
)

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"


class RequestContextFilter(logging.Filter):
    """Inject the current request id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _request_context.get()
        record.request_id = ctx.request_id if ctx else "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure the root pdfsmith logger. Safe to call more than once."""
    logger = logging.getLogger("pdfsmith")
    logger.setLevel(level.upper())

    for handler in logger.handlers:
        if getattr(handler, "_pdfsmith", False):
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    handler._pdfsmith = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_context(ctx: RequestContext) -> None:
    _request_context.set(ctx)


def get_request_context() -> RequestContext | None:
    return _request_context.get()


def clear_request_context() -> None:
    _request_context.set(None)
