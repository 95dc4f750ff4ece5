"""
Handler factories for logging.dictConfig.

Each function returns the dict for one handler entry; `builder.py` decides
which of them are installed. The formatter and filter names referenced here
("json", "standard", "request_id", "redact") are declared by the builder.
"""

from pathlib import Path

from catalog.config.settings import Settings

# Every handler stamps the request id and masks sensitive extras.
HANDLER_FILTERS = ["request_id", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def _stream(formatter: str, level: str) -> dict:
    # StreamHandler writes to stderr unless told otherwise
    return {
        "class": "logging.StreamHandler",
        "formatter": formatter,
        "level": level,
        "filters": list(HANDLER_FILTERS),
    }


def _rotating_file(settings: Settings, filename: str, formatter: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "formatter": formatter,
        "level": level,
        "filters": list(HANDLER_FILTERS),
    }


def get_console_handler(settings: Settings) -> dict:
    """All records at or above LOG_LEVEL to stderr."""
    return _stream(_formatter_name(settings), settings.LOG_LEVEL)


def get_error_console_handler(settings: Settings) -> dict:
    """ERROR and above as JSON on the console, used when files are disabled."""
    return _stream("json", "ERROR")


def get_file_handler(settings: Settings) -> dict:
    """All records at or above LOG_LEVEL to a rotating `<LOG_DIR>/app.log`."""
    return _rotating_file(settings, "app.log", _formatter_name(settings), settings.LOG_LEVEL)


def get_error_file_handler(settings: Settings) -> dict:
    """ERROR and above, always JSON, to a rotating `<LOG_DIR>/errors.log`."""
    return _rotating_file(settings, "errors.log", "json", "ERROR")
