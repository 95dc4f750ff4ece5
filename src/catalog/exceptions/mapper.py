"""
Turn database integrity failures into app-level errors.

    IntegrityError --classify_integrity_error--> UniqueConstraintError | UnknownIntegrityError
                   --raise_mapped_integrity_error--> DuplicateError | RepositoryError

Repositories wrap their writes in `db_error_handler`, so a unique-constraint
violation caused by a concurrent insert surfaces exactly like the duplicate
found by a pre-insert existence check.
"""
import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import DuplicateError, RepositoryError
from .integrity_classifier import UniqueConstraintError, classify_integrity_error

logger = logging.getLogger(__name__)


# Driver messages that name the offending column(s), tried in order:
#   Postgres  'DETAIL:  Key (name)=(Electronics) already exists.'
#   SQLite    'UNIQUE constraint failed: categories.name'
#   MySQL     "Duplicate entry 'Electronics' for key 'categories.uq_categories_name'"
_COLUMN_PATTERNS = (
    re.compile(r"key \((?P<cols>[^)]+)\)=", re.IGNORECASE),
    re.compile(r"UNIQUE constraint failed: (?P<cols>.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"Duplicate entry .* for key '?(?P<cols>[^']+)'?", re.IGNORECASE),
)


def _split_columns(raw: str) -> list[str]:
    # "categories.name, categories.slug" -> ["name", "slug"]
    return [part.strip().strip('"').split(".")[-1] for part in raw.split(",") if part.strip()]


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the offending column names from the driver message.
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _COLUMN_PATTERNS:
        match = pattern.search(msg)
        if match:
            return _split_columns(match.group("cols")) or None
    return None


def _duplicate_message(model: str, columns: list[str] | None) -> str:
    if columns:
        return f"{model} already exists for field(s): {', '.join(columns)}"
    return f"{model} already exists"


def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Raise the app-level error for `exc`, chained to it. Populates `.fields`
    and `.constraint` where the driver reports them. Client-facing messages
    never contain raw driver text.
    """
    exc_cls, constraint = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model = model_name or "Record"
    context = {"model": model, "fields": columns, "constraint": constraint}

    if exc_cls is UniqueConstraintError:
        # expected client error (409)
        logger.info("mapper.duplicate_detected", extra=context)
        raise DuplicateError(_duplicate_message(model, columns), fields=columns, constraint=constraint) from exc

    logger.warning("mapper.unknown_integrity_error", extra={**context, "raw": str(exc.orig)})
    raise RepositoryError(f"{model} database integrity error.", fields=columns, constraint=constraint) from exc


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Wrap repository writes and the request commit:

        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()

    On failure the session is rolled back and a sanitized app-level error is
    raised; app-level errors raised inside the block pass through untouched.
    Non-integrity failures (lost connection, failed commit) carry the
    `database_error` code and surface as 500.
    """
    try:
        yield
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except RepositoryError:
        raise
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("repo.unexpected_db_error", extra={"model": model_name})
        raise RepositoryError(
            f"Failed to operate on {model_name or 'database'}", error_code="database_error"
        ) from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("repo.rollback_failed", extra={"model": model_name})
