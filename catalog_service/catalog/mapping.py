"""Conversions between catalog models and transport records.

Pure functions: they never touch the database and never raise on
missing optional fields.
"""

from catalog_service.catalog.dto import CategoryDto, ProductDto
from catalog_service.catalog.models import Category, Product


def category_to_dto(category: Category) -> CategoryDto:
    """Convert a Category model to its transport record.

    The parent is emitted one level deep, without its own parent.
    """
    parent = category.parent
    return CategoryDto(
        category_id=category.id,
        category_title=category.title,
        image_url=category.image_url,
        parent_category=(
            CategoryDto(
                category_id=parent.id,
                category_title=parent.title,
                image_url=parent.image_url,
            )
            if parent is not None
            else None
        ),
    )


def parent_id_of(dto: CategoryDto) -> int | None:
    """Get the parent reference carried by a category record.

    A parent record without an ID means "no parent".
    """
    if dto.parent_category is None:
        return None
    return dto.parent_category.category_id


def category_from_dto(dto: CategoryDto) -> Category:
    """Convert a category record to a transient Category model.

    Only the parent's id is kept; the parent's title and image are
    read from the store when the model is loaded again.
    """
    return Category(
        id=dto.category_id,
        title=dto.category_title,
        image_url=dto.image_url,
        parent_id=parent_id_of(dto),
    )


def product_to_dto(product: Product) -> ProductDto:
    """Convert a Product model to its transport record."""
    return ProductDto(
        product_id=product.id,
        product_title=product.title,
        image_url=product.image_url,
        sku=product.sku,
        price_unit=product.unit_price,
        quantity=product.quantity,
        category=category_to_dto(product.category) if product.category is not None else None,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def product_from_dto(dto: ProductDto) -> Product:
    """Convert a product record to a transient Product model."""
    return Product(
        id=dto.product_id,
        title=dto.product_title,
        image_url=dto.image_url,
        sku=dto.sku,
        unit_price=dto.price_unit,
        quantity=dto.quantity,
        category_id=dto.category.category_id if dto.category is not None else None,
        created_at=dto.created_at,
        updated_at=dto.updated_at,
    )
