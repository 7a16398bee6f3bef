"""
app/core/logging.py

Purpose: Logging configuration

- JSON logs in production, readable colored logs in development
- Per-request context (user_id, phone, intent) carried in a ContextVar,
  so concurrent webhook requests never tag each other's records
"""

import logging
import sys
import json
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, List, Tuple

from app.core.config import settings


CONTEXT_FIELDS = ("user_id", "phone", "intent")

_context: ContextVar[Dict[str, Any]] = ContextVar("spendwise_log_context", default={})

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


def _context_items(record: logging.LogRecord) -> List[Tuple[str, str]]:
    return [
        (field, str(getattr(record, field)))
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    ]


class ContextFilter(logging.Filter):
    """
    Copies the active LogContext onto each record.

    Values passed explicitly through `extra=` win over the context.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line, for log shippers.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(_context_items(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class DevelopmentFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = _COLORS.get(record.levelname, _RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"{color}[{timestamp}] {record.levelname:<8}{_RESET} {record.name}: {record.getMessage()}"

        context = _context_items(record)
        if context:
            message += " [" + ", ".join(f"{k}={v}" for k, v in context) + "]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging():
    """
    Installs a single stdout handler on the root logger.
    Uses JSON format in production, human-readable in development.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for noisy in ("httpx", "motor", "pymongo", "google_genai", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger("spendwise")
    logger.info(f"Logging configured (env={settings.ENVIRONMENT}, level={settings.LOG_LEVEL})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Returns a logger under the `spendwise` namespace."""
    return logging.getLogger(f"spendwise.{name}")


def current_context() -> Dict[str, Any]:
    return dict(_context.get())


class LogContext:
    """
    Adds fields to every record logged inside the block.

    Nested blocks merge with the enclosing one and restore it on exit.

    Usage:
        with LogContext(phone="+15551230000", intent="spend"):
            logger.info("Logging expense")
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token = None

    def __enter__(self):
        self._token = _context.set({**_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _context.reset(self._token)
