"""Category API endpoints.

Provides CRUD endpoints for categories. Reserved categories are never
listed and cannot be deleted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.api.schemas import CategoryCollectionResponse, ErrorResponse
from catalog_service.application.category_service import (
    CategoryService,
    get_category_service,
)
from catalog_service.catalog.dto import CategoryDto
from catalog_service.infrastructure.database import get_session

router = APIRouter(prefix="/api/categories", tags=["Categories"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CategoryService:
    """Get category service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_category_service(session, request_id=request_id)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=CategoryCollectionResponse,
    summary="List categories",
)
async def list_categories(
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryCollectionResponse:
    """List all non-reserved categories."""
    return CategoryCollectionResponse(collection=await service.list_all())


@router.get(
    "/{category_id}",
    response_model=CategoryDto,
    responses={404: {"model": ErrorResponse}},
    summary="Get category",
)
async def get_category(
    category_id: int,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryDto:
    """Get a category by ID."""
    return await service.get_by_id(category_id)


@router.post(
    "",
    response_model=CategoryDto,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Create category",
)
async def create_category(
    body: CategoryDto,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryDto:
    """Create a category.

    The title must be unique ignoring case. A parent is attached when
    ``parentCategory.categoryId`` is given.
    """
    return await service.save(body)


@router.put(
    "",
    response_model=CategoryDto,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update category",
)
async def update_category(
    body: CategoryDto,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryDto:
    """Update the category identified by ``categoryId`` in the body."""
    return await service.update(body)


@router.put(
    "/{category_id}",
    response_model=CategoryDto,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update category by ID",
)
async def update_category_by_id(
    category_id: int,
    body: CategoryDto,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryDto:
    """Update the category identified by the path."""
    return await service.update_by_id(category_id, body)


@router.delete(
    "/{category_id}",
    response_model=bool,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Delete category",
)
async def delete_category(
    category_id: int,
    service: Annotated[CategoryService, Depends(get_service)],
) -> bool:
    """Delete a category.

    Its products are moved to "No category" and its children become
    root categories.
    """
    await service.delete_by_id(category_id)
    return True
