"""
Base repository class providing common database operations.

Reusable foundation for repositories working with SQLAlchemy async sessions.
Model-specific repositories inherit from it and add their own queries.

Repositories never commit: they `flush()` so server-generated values (ids,
defaults) are available, and leave the transaction boundary to the
request-scoped session dependency (`catalog.database.session.get_async_session`).
"""
import time
import logging
from typing import TypeVar, Generic, Type, Any

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.database.base import Base
from catalog.exceptions.base import RepositoryError, InvalidFieldError
from catalog.exceptions.mapper import db_error_handler

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), used to build queries.
            db: The async database session, injected per request.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """
        Persist a new entity and return it with its server-generated fields loaded.

        Raises:
            DuplicateError: A unique constraint rejected the row.
            RepositoryError: Any other integrity or database failure.
        """
        model_name = self.model.__name__
        logger.debug("repo.save.start", extra={"model": model_name, "operation": "save"})

        start = time.perf_counter()
        async with db_error_handler(self.db, model_name):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "repo.save.success",
            extra={
                "model": model_name,
                "operation": "save",
                "id": getattr(entity, "id", None),
                "duration_ms": duration_ms,
            },
        )
        return entity

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """
        Get an entity by its primary key, or None when there is no such row.

        Raises:
            RepositoryError: If the query fails.
        """
        try:
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()
            logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id} (found={entity is not None})")
            return entity

        except Exception as e:
            logger.error(f"Error retrieving {self.model.__name__} by ID {entity_id}: {e}")
            raise RepositoryError(
                f"Failed to retrieve {self.model.__name__}", error_code="database_error"
            ) from e

    async def exists_by_field(self, field: str, value: Any) -> bool:
        """
        Check whether any row has `field == value`, without loading it.

        Raises:
            InvalidFieldError: The model has no such field.
            RepositoryError: If the query fails.
        """
        column = self._column(field)
        try:
            # SELECT EXISTS (SELECT 1 FROM <table> WHERE <field> = :value)
            result = await self.db.execute(select(exists().where(column == value)))
            found = bool(result.scalar())
            logger.debug(f"{self.model.__name__} with {field}={value!r} exists: {found}")
            return found

        except Exception as e:
            logger.error(f"Error checking existence of {self.model.__name__} by {field}: {e}")
            raise RepositoryError(
                f"Failed to check {self.model.__name__} existence", error_code="database_error"
            ) from e

    # =================================================================================================================
    # Helpers
    # =================================================================================================================

    def _column(self, field: str):
        if field not in self.model.__table__.columns:
            logger.info(
                "repo.invalid_field",
                extra={"model": self.model.__name__, "invalid_fields": [field]},
            )
            raise InvalidFieldError(f"{self.model.__name__} has no field '{field}'", fields=[field])
        return getattr(self.model, field)
