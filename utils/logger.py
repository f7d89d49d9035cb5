"""Logging setup for the billing CLI and effects. Logs go to stderr; stdout carries tables and invoices."""

from __future__ import annotations

import logging
import sys
from typing import Any

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class BillingFormatter(logging.Formatter):
    """Appends the key=value context given to log_structured (op, status, bill id ...)."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        return line


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    stream: Any = None,
) -> None:
    """Configure the root logger; safe to call again (handlers are replaced)."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(BillingFormatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
    # requests' connection pool logs every call at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def log_structured(logger: logging.Logger, level: int, msg: str, **context: Any) -> None:
    """Log msg with key=value context rendered by BillingFormatter."""
    logger.log(level, msg, extra={"context": context})
