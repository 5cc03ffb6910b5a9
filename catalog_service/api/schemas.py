"""API schemas for the catalog API.

Pydantic models for response envelopes and errors. The category and
product records themselves live in ``catalog_service.catalog.dto``.
"""

from typing import Any

from pydantic import BaseModel, Field

from catalog_service.catalog.dto import CategoryDto, ProductDto


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Collection Schemas
# ============================================================================


class CategoryCollectionResponse(BaseModel):
    """List of categories."""

    collection: list[CategoryDto] = Field(..., description="Categories ordered by ID")


class ProductCollectionResponse(BaseModel):
    """List of products."""

    collection: list[ProductDto] = Field(..., description="Products ordered by ID")
