"""
Category endpoints.

Thin layer: validates the request shape, calls the service, shapes the status
and body. Service errors are left to the registered exception handlers.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.dependencies import get_category_service
from catalog.database.session import commit_session, get_async_session
from catalog.mappers.category_mapper import to_dto
from catalog.schemas.category import CategoryDTO, CategoryResponse
from catalog.schemas.error import ErrorResponse
from catalog.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.post(
    "",
    response_model=CategoryDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def create_category(
    payload: CategoryDTO,
    response: Response,
    service: CategoryService = Depends(get_category_service),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Create a category. The body echoes the DTO; `Location` points at the new resource.

    The transaction is committed before the response is built, so a 201 is
    only ever sent for a row that is stored.
    """
    created = await service.create_category(payload)
    # same session as the repository: FastAPI caches dependencies per request
    await commit_session(db, "Category")
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return to_dto(created)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
):
    """Fetch one category by id."""
    return await service.get_category_by_id(category_id)
