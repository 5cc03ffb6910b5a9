"""Tests for the product application service."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.application.category_service import CategoryService
from catalog_service.application.product_service import ProductService, validate_new_product
from catalog_service.catalog.dto import CategoryDto, ProductDto
from catalog_service.catalog.models import Category, CategoryKind, Product
from catalog_service.catalog.repository import ProductRepository
from catalog_service.domain.exceptions import (
    CategoryNotFoundError,
    ConfigurationError,
    ProductNotFoundError,
    ValidationError,
)


def make_product(category_id: int | None, **overrides) -> ProductDto:
    """Build a complete product record."""
    fields = {
        "product_title": "Laptop",
        "image_url": "https://example.com/laptop.jpg",
        "sku": "SKU1",
        "price_unit": 999.0,
        "quantity": 5,
        "category": CategoryDto(category_id=category_id),
    }
    fields.update(overrides)
    return ProductDto(**fields)


async def count_products(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Product.id)))
    return result.scalar_one()


class TestValidateNewProduct:
    """Tests for the mandatory field checks."""

    def test_complete_product_passes(self) -> None:
        """A complete record raises nothing."""
        validate_new_product(make_product(1))

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"product_title": None}, "productTitle"),
            ({"product_title": ""}, "productTitle"),
            ({"image_url": None}, "imageUrl"),
            ({"sku": ""}, "sku"),
            ({"price_unit": None}, "priceUnit"),
            ({"quantity": None}, "quantity"),
            ({"category": None}, "category"),
            ({"category": CategoryDto()}, "category"),
        ],
    )
    def test_names_missing_field(self, overrides: dict, field: str) -> None:
        """The missing field is named in the error."""
        with pytest.raises(ValidationError) as exc_info:
            validate_new_product(make_product(1, **overrides))
        assert exc_info.value.field == field

    def test_reports_first_missing_field(self) -> None:
        """Fields are checked in a fixed order."""
        with pytest.raises(ValidationError) as exc_info:
            validate_new_product(make_product(1, sku=None, quantity=None))
        assert exc_info.value.field == "sku"

    def test_zero_values_are_present(self) -> None:
        """Zero price and quantity count as supplied."""
        validate_new_product(make_product(1, price_unit=0.0, quantity=0))


class TestSave:
    """Tests for save."""

    @pytest.mark.asyncio
    async def test_creates_product(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """The product is stored with its category and creation time."""
        saved = await product_service.save(make_product(electronics.category_id))

        assert saved.product_id is not None
        assert saved.product_title == "Laptop"
        assert saved.category.category_id == electronics.category_id
        assert saved.category.category_title == "Electronics"
        assert saved.created_at is not None
        assert saved.updated_at is None

    @pytest.mark.asyncio
    async def test_keeps_supplied_created_at(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """A supplied creation time is kept."""
        created = datetime(2020, 1, 1, tzinfo=timezone.utc)
        saved = await product_service.save(
            make_product(electronics.category_id, created_at=created)
        )
        assert saved.created_at == created

    @pytest.mark.asyncio
    async def test_discards_candidate_id(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """A supplied ID cannot overwrite an existing product."""
        first = await product_service.save(make_product(electronics.category_id))
        second = await product_service.save(
            make_product(electronics.category_id, product_id=first.product_id, sku="SKU2")
        )

        assert second.product_id != first.product_id
        assert (await product_service.get_by_id(first.product_id)).sku == "SKU1"

    @pytest.mark.asyncio
    async def test_missing_field_writes_nothing(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
    ) -> None:
        """Validation failures leave the store unchanged."""
        with pytest.raises(ValidationError) as exc_info:
            await product_service.save(make_product(electronics.category_id, image_url=None))

        assert exc_info.value.field == "imageUrl"
        assert await count_products(session) == 0

    @pytest.mark.asyncio
    async def test_unknown_category(
        self, session: AsyncSession, product_service: ProductService
    ) -> None:
        """An unknown category ID raises CategoryNotFoundError."""
        with pytest.raises(CategoryNotFoundError):
            await product_service.save(make_product(999))
        assert await count_products(session) == 0

    @pytest.mark.asyncio
    async def test_deleted_category_is_not_a_target(
        self, product_service: ProductService, reserved: dict[CategoryKind, int]
    ) -> None:
        """Products cannot be created directly in "Deleted"."""
        with pytest.raises(CategoryNotFoundError):
            await product_service.save(make_product(reserved[CategoryKind.DELETED]))

    @pytest.mark.asyncio
    async def test_no_category_is_a_target(
        self, product_service: ProductService, reserved: dict[CategoryKind, int]
    ) -> None:
        """Products can be created in "No category"."""
        saved = await product_service.save(make_product(reserved[CategoryKind.UNCATEGORIZED]))
        assert saved.category.category_title == "No category"
        assert [p.product_id for p in await product_service.list_all()] == [saved.product_id]

    @pytest.mark.asyncio
    async def test_duplicate_sku_rejected_by_store(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
    ) -> None:
        """SKU uniqueness is a store constraint."""
        await product_service.save(make_product(electronics.category_id))

        with pytest.raises(IntegrityError):
            await product_service.save(make_product(electronics.category_id))
        await session.rollback()

        assert await count_products(session) == 1


class TestListAndGet:
    """Tests for list_all and get_by_id."""

    @pytest.mark.asyncio
    async def test_list_empty(self, product_service: ProductService) -> None:
        """An empty store lists nothing."""
        assert await product_service.list_all() == []

    @pytest.mark.asyncio
    async def test_get_unknown(self, product_service: ProductService) -> None:
        """Unknown IDs raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError) as exc_info:
            await product_service.get_by_id(42)
        assert exc_info.value.message == "Product with id: 42 not found"


class TestUpdate:
    """Tests for the wholesale update tier."""

    @pytest.mark.asyncio
    async def test_replaces_fields(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """All fields come from the candidate and updatedAt is set."""
        saved = await product_service.save(make_product(electronics.category_id))

        updated = await product_service.update(
            make_product(
                electronics.category_id,
                product_id=saved.product_id,
                product_title="Laptop Pro",
                price_unit=1299.0,
                quantity=2,
            )
        )

        assert updated.product_id == saved.product_id
        assert updated.product_title == "Laptop Pro"
        assert updated.price_unit == 1299.0
        assert updated.quantity == 2
        assert updated.created_at == saved.created_at
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_moves_to_other_category(
        self,
        product_service: ProductService,
        category_service: CategoryService,
        electronics: CategoryDto,
    ) -> None:
        """The candidate's category is resolved and applied."""
        books = await category_service.save(CategoryDto(category_title="Books"))
        saved = await product_service.save(make_product(electronics.category_id))

        updated = await product_service.update(
            make_product(books.category_id, product_id=saved.product_id)
        )

        assert updated.category.category_id == books.category_id

    @pytest.mark.asyncio
    async def test_without_category_keeps_current(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """A candidate without category keeps the current one."""
        saved = await product_service.save(make_product(electronics.category_id))

        updated = await product_service.update(
            make_product(None, product_id=saved.product_id, category=None)
        )

        assert updated.category.category_id == electronics.category_id

    @pytest.mark.asyncio
    async def test_without_id(self, product_service: ProductService) -> None:
        """A record without ID cannot be updated."""
        with pytest.raises(ProductNotFoundError):
            await product_service.update(make_product(1))

    @pytest.mark.asyncio
    async def test_unknown_id(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """Unknown IDs raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await product_service.update(
                make_product(electronics.category_id, product_id=404)
            )

    @pytest.mark.asyncio
    async def test_unknown_category(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """An unknown category leaves the product untouched."""
        saved = await product_service.save(make_product(electronics.category_id))

        with pytest.raises(CategoryNotFoundError):
            await product_service.update(
                make_product(999, product_id=saved.product_id, product_title="Changed")
            )

        current = await product_service.get_by_id(saved.product_id)
        assert current.product_title == "Laptop"


class TestUpdateById:
    """Tests for the merge update tier."""

    @pytest.mark.asyncio
    async def test_merges_supplied_fields(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """Only supplied fields change."""
        saved = await product_service.save(make_product(electronics.category_id))

        updated = await product_service.update_by_id(
            saved.product_id, ProductDto(quantity=10)
        )

        assert updated.quantity == 10
        assert updated.product_title == "Laptop"
        assert updated.sku == "SKU1"
        assert updated.price_unit == 999.0
        assert updated.category.category_id == electronics.category_id
        assert updated.created_at == saved.created_at
        assert updated.updated_at is not None

    @pytest.mark.asyncio
    async def test_changes_category(
        self, product_service: ProductService, reserved: dict[CategoryKind, int],
        electronics: CategoryDto,
    ) -> None:
        """A supplied category is resolved and applied."""
        saved = await product_service.save(make_product(electronics.category_id))

        updated = await product_service.update_by_id(
            saved.product_id,
            ProductDto(category=CategoryDto(category_id=reserved[CategoryKind.UNCATEGORIZED])),
        )

        assert updated.category.category_title == "No category"

    @pytest.mark.asyncio
    async def test_cannot_move_to_deleted(
        self,
        product_service: ProductService,
        reserved: dict[CategoryKind, int],
        electronics: CategoryDto,
    ) -> None:
        """Soft deletion only happens through delete_by_id."""
        saved = await product_service.save(make_product(electronics.category_id))

        with pytest.raises(CategoryNotFoundError):
            await product_service.update_by_id(
                saved.product_id,
                ProductDto(category=CategoryDto(category_id=reserved[CategoryKind.DELETED])),
            )

    @pytest.mark.asyncio
    async def test_unknown_id(self, product_service: ProductService) -> None:
        """Unknown IDs raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await product_service.update_by_id(404, ProductDto(product_title="x"))


class TestDelete:
    """Tests for soft deletion."""

    @pytest.mark.asyncio
    async def test_soft_deletes(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
        reserved: dict[CategoryKind, int],
    ) -> None:
        """The row stays, moved to "Deleted", and normal reads skip it."""
        saved = await product_service.save(make_product(electronics.category_id))

        await product_service.delete_by_id(saved.product_id)

        assert await product_service.list_all() == []
        with pytest.raises(ProductNotFoundError):
            await product_service.get_by_id(saved.product_id)

        stored = await ProductRepository(session).find_by_id(saved.product_id)
        assert stored is not None
        assert stored.category_id == reserved[CategoryKind.DELETED]
        assert stored.updated_at is not None
        assert await count_products(session) == 1

    @pytest.mark.asyncio
    async def test_delete_twice(
        self, product_service: ProductService, electronics: CategoryDto
    ) -> None:
        """An already deleted product is not found again."""
        saved = await product_service.save(make_product(electronics.category_id))
        await product_service.delete_by_id(saved.product_id)

        with pytest.raises(ProductNotFoundError):
            await product_service.delete_by_id(saved.product_id)

    @pytest.mark.asyncio
    async def test_delete_unknown(self, product_service: ProductService) -> None:
        """Unknown IDs raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await product_service.delete_by_id(404)

    @pytest.mark.asyncio
    async def test_missing_deleted_category(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
    ) -> None:
        """Without the "Deleted" row the product is left as it was."""
        saved = await product_service.save(make_product(electronics.category_id))
        await session.execute(
            delete(Category).where(Category.kind == CategoryKind.DELETED.value)
        )
        await session.commit()

        with pytest.raises(ConfigurationError):
            await product_service.delete_by_id(saved.product_id)

        current = await product_service.get_by_id(saved.product_id)
        assert current.category.category_id == electronics.category_id


class TestLifecycle:
    """End-to-end product lifecycle."""

    @pytest.mark.asyncio
    async def test_create_rename_delete(
        self,
        session: AsyncSession,
        category_service: CategoryService,
        product_service: ProductService,
    ) -> None:
        """Create, rename through the merge tier, then soft-delete."""
        category = await category_service.save(CategoryDto(category_title="Electronics"))
        assert category.category_id is not None

        product = await product_service.save(
            ProductDto(
                product_title="Laptop",
                image_url="x",
                sku="SKU1",
                price_unit=999.0,
                quantity=5,
                category=CategoryDto(category_id=category.category_id),
            )
        )
        assert product.created_at is not None

        renamed = await product_service.update_by_id(
            product.product_id, ProductDto(product_title="Laptop Pro")
        )
        assert renamed.product_title == "Laptop Pro"
        assert renamed.category.category_id == category.category_id
        assert renamed.created_at == product.created_at
        assert renamed.updated_at is not None

        await product_service.delete_by_id(product.product_id)

        assert await product_service.list_all() == []
        stored = await ProductRepository(session).find_by_id(product.product_id)
        assert stored.category.title == "Deleted"

        with pytest.raises(ValidationError):
            await category_service.save(CategoryDto(category_title="electronics"))


class TestTimestamps:
    """Timestamps read back from the store."""

    @pytest.mark.asyncio
    async def test_reloaded_timestamps_stay_utc(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
    ) -> None:
        """A product loaded afresh carries the same aware UTC timestamps."""
        saved = await product_service.save(make_product(electronics.category_id))
        updated = await product_service.update_by_id(saved.product_id, ProductDto(quantity=2))
        session.expunge_all()

        reloaded = await product_service.get_by_id(saved.product_id)

        assert reloaded.created_at == saved.created_at
        assert reloaded.updated_at == updated.updated_at
        assert reloaded.created_at.utcoffset() == timedelta(0)
        assert reloaded.updated_at.utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_offsets_are_normalized_to_utc(
        self,
        session: AsyncSession,
        product_service: ProductService,
        electronics: CategoryDto,
    ) -> None:
        """A creation time given in another zone is stored as the same instant."""
        created = datetime(2020, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        saved = await product_service.save(
            make_product(electronics.category_id, created_at=created)
        )
        session.expunge_all()

        reloaded = await product_service.get_by_id(saved.product_id)

        assert reloaded.created_at == created
        assert reloaded.created_at.utcoffset() == timedelta(0)
