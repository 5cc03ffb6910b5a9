"""Product API endpoints.

Provides CRUD endpoints for products. Deleting a product moves it to
the "Deleted" category; it then disappears from every read endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.api.schemas import ErrorResponse, ProductCollectionResponse
from catalog_service.application.product_service import (
    ProductService,
    get_product_service,
)
from catalog_service.catalog.dto import ProductDto
from catalog_service.infrastructure.database import get_session

router = APIRouter(prefix="/api/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProductService:
    """Get product service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_product_service(session, request_id=request_id)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductCollectionResponse,
    summary="List products",
)
async def list_products(
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductCollectionResponse:
    """List all products that are not deleted."""
    return ProductCollectionResponse(collection=await service.list_all())


@router.get(
    "/{product_id}",
    response_model=ProductDto,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDto:
    """Get a product by ID."""
    return await service.get_by_id(product_id)


@router.post(
    "",
    response_model=ProductDto,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    body: ProductDto,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDto:
    """Create a product.

    ``productTitle``, ``imageUrl``, ``sku``, ``priceUnit``, ``quantity``
    and ``category.categoryId`` are required; ``productId`` is ignored.
    The "Deleted" category is not a valid target and answers 404 like an
    unknown category; products reach it only through DELETE.
    """
    return await service.save(body)


@router.put(
    "",
    response_model=ProductDto,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Replace product",
)
async def update_product(
    body: ProductDto,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDto:
    """Replace the product identified by ``productId`` with a full record.

    The "Deleted" category is rejected as an unknown category (404).
    """
    return await service.update(body)


@router.put(
    "/{product_id}",
    response_model=ProductDto,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update product by ID",
)
async def update_product_by_id(
    product_id: int,
    body: ProductDto,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductDto:
    """Update the supplied fields of the product identified by the path.

    The "Deleted" category is rejected as an unknown category (404);
    "No category" is accepted.
    """
    return await service.update_by_id(product_id, body)


@router.delete(
    "/{product_id}",
    response_model=bool,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> bool:
    """Soft-delete a product."""
    await service.delete_by_id(product_id)
    return True
