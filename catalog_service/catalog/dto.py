"""Transport records for categories and products.

Pydantic models exchanged with API clients. Field names are exposed in
camelCase (``categoryTitle``, ``priceUnit`` ...) and can be populated
either by alias or by attribute name.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogRecord(BaseModel):
    """Base for catalog transport records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryDto(CatalogRecord):
    """Category as seen by API clients.

    ``parent_category`` is None for root categories; when it is set, only
    its ``category_id`` is used to resolve the parent on writes.
    """

    category_id: int | None = Field(default=None, description="Category identifier")
    category_title: str | None = Field(default=None, description="Category title")
    image_url: str | None = Field(default=None, description="Category image URL")
    parent_category: "CategoryDto | None" = Field(
        default=None, description="Parent category, null for roots"
    )


class ProductDto(CatalogRecord):
    """Product as seen by API clients."""

    product_id: int | None = Field(default=None, description="Product identifier")
    product_title: str | None = Field(default=None, description="Product title")
    image_url: str | None = Field(default=None, description="Product image URL")
    sku: str | None = Field(default=None, description="Stock Keeping Unit")
    price_unit: float | None = Field(default=None, description="Price per unit")
    quantity: int | None = Field(default=None, description="Available quantity")
    category: CategoryDto | None = Field(default=None, description="Owning category")
    created_at: datetime | None = Field(default=None, description="Creation time")
    updated_at: datetime | None = Field(default=None, description="Last update time")


CategoryDto.model_rebuild()
