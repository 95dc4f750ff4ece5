"""
Classify a SQLAlchemy IntegrityError by the kind of constraint that failed.

The classes below are labels used inside the repository layer only; callers
outside it see the app-level errors from `base.py` (see `mapper.py`).
"""
import logging
from enum import Enum
from typing import Type

from sqlalchemy.exc import IntegrityError

from .base import RepositoryError

logger = logging.getLogger(__name__)


class ConstraintViolationError(RepositoryError):
    """Base label for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
}

# Message fragments (lower-cased) used when no SQLSTATE is available (SQLite, MySQL).
MESSAGE_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique failed", "unique violation", "duplicate")),
]


def _sqlstate(orig) -> str | None:
    # psycopg 3 exposes `sqlstate`, psycopg2 `pgcode`, asyncpg (through the
    # SQLAlchemy adapter) `sqlstate` as well.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _classify_from_postgres_diag(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    code = _sqlstate(orig)
    if not code:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None

    exception_class = PGCODE_EXCEPTION_MAP.get(code)
    if exception_class:
        logger.debug(
            "integrity.postgres_diagnostic",
            extra={"sqlstate": code, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "integrity.unknown_sqlstate",
        extra={"sqlstate": code, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolationError], None]:
    normalized = (msg or "").lower()

    for exception_class, keywords in MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return exception_class, None

    logger.warning("integrity.unknown_message", extra={"message_snippet": normalized[:200]})
    return UnknownIntegrityError, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Classify an IntegrityError into a ConstraintViolationError subclass.

    Returns:
        (ExceptionClass, constraint name if the driver reports one)
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_postgres_diag(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))
