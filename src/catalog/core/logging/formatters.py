"""
Log formatters.

- JsonFormatter: one JSON object per line, for containers and log shippers.
- ColorFormatter: aligned, colourised lines for a developer terminal.
"""
import json
import logging
from typing import Any
from logging import LogRecord

from catalog.utils.logging import get_project_version

PROJECT_VERSION = get_project_version()

# Attributes every LogRecord carries; anything else on the record came from `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Emits timestamp, level, logger, message, pathname, lineno plus the
    observability fields (service, env, version, request_id), exception /
    stack text when present, and every `extra={...}` key. Values that are not
    JSON-serializable are written as `str(value)`; formatting never raises.
    """

    def __init__(self, *, env: str | None = None, service: str | None = "catalog-api", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service or "catalog-api"

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_record or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development formatter: TIMESTAMP | LEVEL | LOGGER | REQUEST_ID | MESSAGE,
    with the level name coloured. Not meant for production log ingestion.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red background
        "RESET": "\033[0m",
    }

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        # reset right after the level so the colour doesn't bleed into the message
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base
