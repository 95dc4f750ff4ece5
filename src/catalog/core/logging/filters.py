"""
Logging filters.

- RequestIdFilter: stamps `record.request_id` from a ContextVar that the HTTP
  middleware sets per request. ContextVars follow the asyncio task, so
  concurrent requests on one thread keep separate ids.
- RedactFilter: masks record attributes whose names look sensitive.
"""
import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id for the current context.

    Returns:
        token: pass it to reset_request_id(token) to restore the previous value.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee every LogRecord has a `request_id` attribute.

    Precedence: an explicit `extra={"request_id": ...}`, then the context value,
    then the sentinel "-" (so `%(request_id)s` never raises).
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


REDACTED = "***REDACTED***"


class RedactFilter(logging.Filter):
    """Replace the value of any record attribute named like a credential."""

    DEFAULT_KEYS = frozenset(
        {"password", "secret", "token", "access_token", "refresh_token", "authorization"}
    )

    def __init__(self, keys=None):
        super().__init__()
        self.keys = frozenset(k.lower() for k in keys) if keys else self.DEFAULT_KEYS

    def filter(self, record: LogRecord) -> bool:
        for key, value in list(vars(record).items()):
            if value is not None and key.lower() in self.keys:
                setattr(record, key, REDACTED)
        return True
