"""
Logging builder: build and apply a dictConfig from Settings, optionally moving
the real handlers behind a queue so request handlers only enqueue records.

Settings used:
 - LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
   ENABLE_SQL_LOGGING, ENV
 - LOG_USE_QUEUE: enable queue-backed logging (QueueHandler + QueueListener)
 - LOG_QUEUE_MAX_SIZE: > 0 for a bounded queue, 0 for unbounded
 - LOG_QUEUE_BLOCKING: with a bounded queue, block producers instead of dropping

Duck-typed: any object with these attributes works (tests pass SimpleNamespace).
"""

from __future__ import annotations

import logging
import logging.config
import queue
import threading
from dataclasses import dataclass, field
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from catalog.config.settings import Settings
from catalog.utils.logging import get_project_name

from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"


@dataclass
class _QueueRuntime:
    """Process-wide state of queue mode; reset by `stop_queue_logging()`."""

    listener: QueueListener | None = None
    log_queue: queue.Queue | None = None
    dropped: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def record_drop(self) -> None:
        with self.lock:
            self.dropped += 1


_runtime = _QueueRuntime()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler for a bounded queue that never blocks the caller: when the
    queue is full the record is dropped and counted (see `get_queue_stats()`).
    """

    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            _runtime.record_drop()


def get_queue_stats() -> dict:
    with _runtime.lock:
        return {"dropped_logs": _runtime.dropped, "queue_present": _runtime.log_queue is not None}


def _logger_entry(level: str, handlers: list[str], propagate: bool = False) -> dict:
    return {"level": level, "handlers": handlers, "propagate": propagate}


def _use_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping:
      - formatters: "standard" (coloured in text mode) and "json"
      - filters: "request_id", "redact"
      - handlers: "console" plus either "file"/"error_file" (LOG_TO_STDOUT false
        and LOG_DIR set) or "error_console"
      - loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine
    """
    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _use_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)
    all_handlers = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
                "format": TEXT_FORMAT,
            },
            "json": {"()": JsonFormatter, "env": settings.ENV, "service": get_project_name()},
        },
        "filters": {
            "request_id": {"()": RequestIdFilter},
            "redact": {"()": RedactFilter},
        },
        "handlers": handlers,
        "loggers": {
            "": _logger_entry(settings.LOG_LEVEL, all_handlers, propagate=True),
            "uvicorn.error": _logger_entry(settings.LOG_LEVEL, all_handlers),
            "uvicorn.access": _logger_entry("INFO", ["console"]),
            # SQL echo may contain row values; off unless asked for
            "sqlalchemy.engine": _logger_entry(
                "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING", ["console"]
            ),
        },
    }


def _detach_handlers(handlers: list[logging.Handler]) -> list[logging.Logger]:
    """
    Remove `handlers` from the root and every named logger. Returns the
    non-root loggers that lost at least one of them.
    """
    root = logging.getLogger()
    touched: list[logging.Logger] = []
    for candidate in [root, *logging.Logger.manager.loggerDict.values()]:
        if not isinstance(candidate, logging.Logger):
            continue
        owned = [h for h in candidate.handlers if h in handlers]
        for h in owned:
            candidate.removeHandler(h)
        if owned and candidate is not root:
            touched.append(candidate)
    return touched


def _start_queue_mode(settings: Settings) -> None:
    root = logging.getLogger()
    real_handlers = list(root.handlers)
    if not real_handlers:
        return

    touched = _detach_handlers(real_handlers)

    max_size = getattr(settings, "LOG_QUEUE_MAX_SIZE", 0) or 0
    blocking = bool(getattr(settings, "LOG_QUEUE_BLOCKING", False))
    log_queue: queue.Queue = queue.Queue(max_size)

    handler_cls = NonBlockingQueueHandler if max_size > 0 and not blocking else QueueHandler
    queue_handler = handler_cls(log_queue)
    # request id and redaction must run in the producing context
    queue_handler.addFilter(RequestIdFilter())
    queue_handler.addFilter(RedactFilter())

    listener = QueueListener(log_queue, *real_handlers, respect_handler_level=True)
    listener.start()

    root.addHandler(queue_handler)
    for logger_obj in touched:
        if not logger_obj.propagate:
            logger_obj.addHandler(queue_handler)

    _runtime.listener = listener
    _runtime.log_queue = log_queue


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration.

    1. Stop a previous queue listener (a second app in the same process).
    2. Create LOG_DIR when file logging is on.
    3. dictConfig(make_dict_config(settings)) and a RequestIdFilter on the root
       logger so `%(request_id)s` is always defined.
    4. With LOG_USE_QUEUE, move the real handlers to a QueueListener thread and
       leave a QueueHandler in their place.
    """
    stop_queue_logging()

    if _use_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())

    if getattr(settings, "LOG_USE_QUEUE", False):
        _start_queue_mode(settings)


def stop_queue_logging() -> None:
    """
    Flush and stop the QueueListener, if one is running.
    """
    listener = _runtime.listener
    if listener is None:
        return

    try:
        listener.stop()  # drains what is already queued, then joins the thread
    except Exception:
        logging.getLogger(__name__).exception("Failed to stop QueueListener cleanly")
    finally:
        _runtime.listener = None
        _runtime.log_queue = None
