"""Structured logging with request ID tracking.

``setup_logging()`` installs a single stdout handler on the root logger:
JSON lines by default (``LOG_FORMAT=json``), or a one-line text format for
local work. Fields passed through ``extra=`` are emitted by both formats.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings


# Set per request by the request ID middleware
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord carries; anything else came in via extra=
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "urllib3", "yfinance", "peewee")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["location"] = f"{record.filename}:{record.lineno} {record.funcName}"

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """``time LEVEL [request] logger: message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        request_id = request_id_var.get()
        rid = f"[{request_id[:8]}] " if request_id else ""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} {record.levelname:8} {rid}{record.name}: {record.getMessage()}"

        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class SensitiveDataFilter(logging.Filter):
    """Redact credential-looking ``key=value`` / ``key: value`` pairs in messages."""

    SENSITIVE_KEYS = ("password", "token", "secret", "authorization", "api_key")

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        keys = "|".join(self.SENSITIVE_KEYS)
        self._pattern = re.compile(
            rf"""(["']?(?:{keys})["']?\s*[=:]\s*)[^\s,}}\]]+""",
            re.IGNORECASE,
        )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._pattern.sub(r"\1[REDACTED]", message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure the root logger. Defaults come from settings."""
    level_name = (level or settings.log_level).upper()
    log_format = fmt or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level_name)
    handler.setFormatter(StructuredFormatter() if log_format == "json" else TextFormatter())
    handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``swingdesk`` namespace."""
    return logging.getLogger(f"swingdesk.{name}")
