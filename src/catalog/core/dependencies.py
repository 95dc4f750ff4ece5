"""
Explicit wiring of the request-scoped object graph:

    AsyncSession -> CategoryRepository -> CategoryService

Routers depend on `get_category_service`; tests can swap any link through
`app.dependency_overrides`.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.database.session import get_async_session
from catalog.repositories.category_repository import CategoryRepository
from catalog.services.category_service import CategoryService


def get_category_repository(db: AsyncSession = Depends(get_async_session)) -> CategoryRepository:
    return CategoryRepository(db)


def get_category_service(
    repository: CategoryRepository = Depends(get_category_repository),
) -> CategoryService:
    return CategoryService(repository)
