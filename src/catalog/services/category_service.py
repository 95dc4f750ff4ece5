"""
Category business logic: the name-uniqueness rule and the entity/DTO mapping
around each repository call.
"""
import logging

from catalog.exceptions.base import DuplicateError, NotFoundError
from catalog.mappers.category_mapper import dto_to_entity, entity_to_response
from catalog.repositories.category_repository import CategoryRepository
from catalog.schemas.category import CategoryDTO, CategoryResponse

logger = logging.getLogger(__name__)

CATEGORY_EXISTS_MESSAGE = "Category already exists"

# Ids are positive and fit the INTEGER primary key column
MAX_CATEGORY_ID = 2**31 - 1


class CategoryService:
    """
    Orchestrates category use cases on top of a repository.

    The repository is passed in explicitly; anything offering
    `exists_by_name`, `save` and `get_by_id` will do (tests use the real
    repository on a throwaway database).
    """

    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    async def create_category(self, dto: CategoryDTO) -> CategoryResponse:
        """
        Create a category whose name is not taken yet.

        Returns:
            The persisted category, including its new id.

        Raises:
            DuplicateError: A category with this name exists (nothing is written).
        """
        if await self.repository.exists_by_name(dto.name):
            logger.info("category.create.conflict", extra={"category_name": dto.name})
            raise DuplicateError(CATEGORY_EXISTS_MESSAGE, fields=["name"])

        try:
            saved = await self.repository.save(dto_to_entity(dto))
        except DuplicateError as exc:
            # Another request inserted the same name between the check and the insert;
            # the unique constraint caught it.
            logger.info("category.create.conflict_on_insert", extra={"category_name": dto.name})
            raise DuplicateError(CATEGORY_EXISTS_MESSAGE, fields=["name"], constraint=exc.constraint) from exc

        logger.info("category.create.success", extra={"category_id": saved.id, "category_name": saved.name})
        return entity_to_response(saved)

    async def get_category_by_id(self, category_id: int) -> CategoryResponse:
        """
        An id no row can have (zero, negative, too large for the column) is
        reported as not found without querying the database.

        Raises:
            NotFoundError: No category has this id.
        """
        entity = None
        if 1 <= category_id <= MAX_CATEGORY_ID:
            entity = await self.repository.get_by_id(category_id)
        if entity is None:
            raise NotFoundError(f"Category not found with id: {category_id}")
        return entity_to_response(entity)
