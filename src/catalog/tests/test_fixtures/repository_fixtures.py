"""Fixtures for repository and service tests."""

import uuid

import pytest
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models.category import Category
from catalog.repositories.category_repository import CategoryRepository
from catalog.services.category_service import CategoryService

# NOTE: All fixtures in this file depend on the `db_session` fixture defined in conftest.py

fake = Faker()


@pytest.fixture
async def category_repository(db_session: AsyncSession) -> CategoryRepository:
    """
    A CategoryRepository bound to the test session.

    Fixtures used:
      - db_session: async SQLAlchemy session on the per-test database.
    """
    return CategoryRepository(db_session)


@pytest.fixture
async def category_service(category_repository: CategoryRepository) -> CategoryService:
    """The service under test, wired to the real repository."""
    return CategoryService(category_repository)


@pytest.fixture
def sample_category_data() -> dict[str, str]:
    """
    Deterministic payload used by many tests.
    Kept synchronous because it does not touch the DB.
    """
    return {
        "name": "Electronics",
        "description": "Electronic devices and accessories",
    }


@pytest.fixture
async def create_category(category_repository: CategoryRepository):
    """
    Factory helper that persists a category with optional overrides.

    Usage:
        category = await create_category(name="Books")
    """
    async def _create(**overrides) -> Category:
        data = {
            "name": f"{fake.word().title()} {uuid.uuid4().hex[:8]}",
            "description": fake.sentence(nb_words=6),
        }
        data.update(overrides)
        return await category_repository.save(Category(**data))

    return _create


@pytest.fixture
async def created_category(create_category, sample_category_data) -> Category:
    """A single persisted category built from `sample_category_data`."""
    return await create_category(**sample_category_data)


@pytest.fixture
async def multiple_categories(create_category) -> list[Category]:
    """
    Three persisted categories with unique, Faker-generated names.
    """
    return [await create_category() for _ in range(3)]
