"""
Category repository: the persistence collaborator of the category service.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models.category import Category
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    """
    Repository for Category entities.

    Inherits `save`, `get_by_id` and friends from `BaseRepository` and adds the
    name lookup the uniqueness rule needs.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

    async def exists_by_name(self, name: str) -> bool:
        """
        Check if a category with this name already exists.

        Args:
            name: Category name; surrounding whitespace is ignored.
        """
        return await self.exists_by_field("name", name.strip())

