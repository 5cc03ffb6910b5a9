"""Product application service.

Keeps every product attached to an existing category:
- Validating mandatory fields on creation
- Resolving category references by lookup
- Tracking creation and update timestamps
- Soft-deleting products by moving them to the "Deleted" category

Two update tiers are offered:

- ``update`` (reference tier) replaces the product wholesale from a full
  record. It checks that the product and its category exist but does not
  run the field-level checks of ``save``; store constraints still apply.
- ``update_by_id`` (merge tier) loads the product and copies over only
  the fields the candidate supplies.
"""

from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.application.category_service import resolve_reserved
from catalog_service.catalog.dto import ProductDto
from catalog_service.catalog.mapping import product_from_dto, product_to_dto
from catalog_service.catalog.models import Category, CategoryKind, Product
from catalog_service.catalog.repository import CategoryRepository, ProductRepository
from catalog_service.domain.exceptions import (
    CategoryNotFoundError,
    ProductNotFoundError,
    ValidationError,
)

logger = structlog.get_logger()


def validate_new_product(candidate: ProductDto) -> None:
    """Check the mandatory fields of a product to be created.

    Fields are checked in a fixed order and the first missing one is
    reported.

    Args:
        candidate: Product record to check.

    Raises:
        ValidationError: Naming the first missing field.
    """
    if not candidate.product_title:
        raise ValidationError("Product title is required", field="productTitle")
    if not candidate.image_url:
        raise ValidationError("Image URL is required", field="imageUrl")
    if not candidate.sku:
        raise ValidationError("SKU is required", field="sku")
    if candidate.price_unit is None:
        raise ValidationError("Unit price is required", field="priceUnit")
    if candidate.quantity is None:
        raise ValidationError("Quantity is required", field="quantity")
    if candidate.category is None or candidate.category.category_id is None:
        raise ValidationError("Category is required", field="category")


class ProductService:
    """Application service for managing products."""

    def __init__(
        self,
        session: AsyncSession,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session for this unit of work.
            request_id: Request ID for correlation.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.request_id = request_id

    async def list_all(self) -> list[ProductDto]:
        """List all products that are not soft-deleted.

        Returns:
            Products ordered by ID.
        """
        logger.info("Listing products", request_id=self.request_id)
        products = await self.products.find_all_excluding_deleted()
        return [product_to_dto(p) for p in products]

    async def get_by_id(self, product_id: int) -> ProductDto:
        """Get a live product by ID.

        Args:
            product_id: Product identifier.

        Returns:
            The product.

        Raises:
            ProductNotFoundError: If absent or soft-deleted.
        """
        logger.info("Fetching product", product_id=product_id, request_id=self.request_id)
        product = await self.products.find_by_id_excluding_deleted(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product_to_dto(product)

    async def save(self, candidate: ProductDto) -> ProductDto:
        """Create a product.

        The candidate's ID is discarded so a caller cannot overwrite an
        existing row by supplying one.

        Args:
            candidate: Product to create.

        Returns:
            The stored product.

        Raises:
            ValidationError: If a mandatory field is missing.
            CategoryNotFoundError: If the category does not exist.
        """
        validate_new_product(candidate)
        category = await self._resolve_category(candidate.category.category_id)

        product = product_from_dto(candidate)
        product.id = None
        product.category = category
        if product.created_at is None:
            product.created_at = datetime.now(timezone.utc)

        await self.products.save(product)
        await self.session.commit()

        logger.info(
            "Product created",
            product_id=product.id,
            sku=product.sku,
            category_id=category.id,
            request_id=self.request_id,
        )
        return product_to_dto(product)

    async def update(self, candidate: ProductDto) -> ProductDto:
        """Replace a product wholesale from a full record.

        Args:
            candidate: Complete product record including its ID.

        Returns:
            The updated product.

        Raises:
            ProductNotFoundError: If the ID is missing or unknown.
            CategoryNotFoundError: If the candidate's category is unknown.
        """
        if candidate.product_id is None or not await self.products.exists_by_id(
            candidate.product_id
        ):
            raise ProductNotFoundError(candidate.product_id)

        existing = await self.products.find_by_id(candidate.product_id)
        replacement = product_from_dto(candidate)
        if replacement.category_id is not None:
            category = await self._resolve_category(replacement.category_id)
        else:
            category = existing.category

        existing.title = replacement.title
        existing.image_url = replacement.image_url
        existing.sku = replacement.sku
        existing.unit_price = replacement.unit_price
        existing.quantity = replacement.quantity
        existing.category = category
        existing.updated_at = datetime.now(timezone.utc)

        await self.products.save(existing)
        await self.session.commit()

        logger.info(
            "Product replaced",
            product_id=existing.id,
            category_id=category.id,
            request_id=self.request_id,
        )
        return product_to_dto(existing)

    async def update_by_id(self, product_id: int, candidate: ProductDto) -> ProductDto:
        """Merge the supplied fields of a candidate into a product.

        Args:
            product_id: Product identifier.
            candidate: Partial product record.

        Returns:
            The updated product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            CategoryNotFoundError: If the candidate's category is unknown.
        """
        existing = await self.products.find_by_id(product_id)
        if existing is None:
            raise ProductNotFoundError(product_id)

        if candidate.category is not None and candidate.category.category_id is not None:
            category = await self._resolve_category(candidate.category.category_id)
        else:
            category = existing.category

        if candidate.product_title is not None:
            existing.title = candidate.product_title
        if candidate.image_url is not None:
            existing.image_url = candidate.image_url
        if candidate.sku is not None:
            existing.sku = candidate.sku
        if candidate.price_unit is not None:
            existing.unit_price = candidate.price_unit
        if candidate.quantity is not None:
            existing.quantity = candidate.quantity
        existing.category = category

        now = datetime.now(timezone.utc)
        if existing.created_at is None:
            existing.created_at = now
        existing.updated_at = now

        await self.products.save(existing)
        await self.session.commit()

        logger.info(
            "Product updated",
            product_id=product_id,
            category_id=category.id,
            request_id=self.request_id,
        )
        return product_to_dto(existing)

    async def delete_by_id(self, product_id: int) -> None:
        """Soft-delete a product by moving it to the "Deleted" category.

        Args:
            product_id: Product identifier.

        Raises:
            ProductNotFoundError: If absent or already soft-deleted.
            ConfigurationError: If "Deleted" was never seeded.
        """
        product = await self.products.find_by_id_excluding_deleted(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        deleted = await resolve_reserved(self.categories, CategoryKind.DELETED)
        previous_category_id = product.category_id

        product.category = deleted
        product.updated_at = datetime.now(timezone.utc)
        await self.products.save(product)
        await self.session.commit()

        logger.info(
            "Product soft-deleted",
            product_id=product_id,
            previous_category_id=previous_category_id,
            request_id=self.request_id,
        )

    async def _resolve_category(self, category_id: int) -> Category:
        """Load a category that a product may reference.

        "No category" is a valid target; "Deleted" is reached only
        through delete_by_id.
        """
        category = await self.categories.find_by_id(category_id)
        if category is None or category.kind == CategoryKind.DELETED.value:
            raise CategoryNotFoundError(category_id)
        return category


# ============================================================================
# Service Factory
# ============================================================================


def get_product_service(
    session: AsyncSession,
    request_id: str | None = None,
) -> ProductService:
    """Get product service instance.

    Args:
        session: Async SQLAlchemy session.
        request_id: Request ID for correlation.

    Returns:
        ProductService instance.
    """
    return ProductService(session, request_id=request_id)
