"""Structured JSON logging with correlation id support.

Domain modules log through the standard ``logging.getLogger(__name__)`` and
attach structured fields with ``extra={"extra_fields": {...}}``;
configure_logging() installs the JSON formatter on the ``stayhub`` logger tree.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .correlation import get_correlation_id

ROOT_LOGGER = "stayhub"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the current correlation id."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_obj["correlationId"] = correlation_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update(extra_fields)

        return json.dumps(log_obj, default=str)


def _install(logger: logging.Logger, level: int) -> logging.Logger:
    # Only configure once (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return logger


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach the JSON handler to the package root logger."""
    return _install(logging.getLogger(ROOT_LOGGER), level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger configured for JSON output."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        configure_logging()
        return logging.getLogger(name)
    return _install(logging.getLogger(name), logging.INFO)
