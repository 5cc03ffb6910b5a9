"""Category and product repositories for database operations.

Provide the lookups the consistency services need: reserved-aware
category queries, soft-delete-aware product queries and the bulk
reassignment used when a category or product is removed.
"""

from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.models import Category, CategoryKind, Product


class CategoryRepository:
    """Repository for Category database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CategoryRepository(session)
            categories = await repo.find_all_excluding_reserved()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, category: Category) -> Category:
        """Save a category to database.

        Args:
            category: Category to save.

        Returns:
            Saved category with its assigned ID.
        """
        self.session.add(category)
        await self.session.flush()
        return category

    async def delete(self, category: Category) -> None:
        """Delete a category row.

        Args:
            category: Category to delete.
        """
        await self.session.delete(category)
        await self.session.flush()

    async def find_all(self) -> Sequence[Category]:
        """Find all categories, reserved ones included."""
        result = await self.session.execute(select(Category).order_by(Category.id))
        return result.scalars().unique().all()

    async def find_all_excluding_reserved(self) -> Sequence[Category]:
        """Find all normal categories ordered by ID."""
        query = (
            select(Category)
            .where(Category.kind == CategoryKind.NORMAL.value)
            .order_by(Category.id)
        )
        result = await self.session.execute(query)
        return result.scalars().unique().all()

    async def find_by_id(self, category_id: int) -> Category | None:
        """Get category by ID, reserved ones included.

        Args:
            category_id: Category ID.

        Returns:
            Category if found, None otherwise.
        """
        result = await self.session.execute(
            select(Category).where(Category.id == category_id)
        )
        return result.scalars().unique().one_or_none()

    async def find_by_id_excluding_reserved(self, category_id: int) -> Category | None:
        """Get a normal category by ID.

        Args:
            category_id: Category ID.

        Returns:
            Category if found and not reserved, None otherwise.
        """
        query = select(Category).where(
            Category.id == category_id,
            Category.kind == CategoryKind.NORMAL.value,
        )
        result = await self.session.execute(query)
        return result.scalars().unique().one_or_none()

    async def find_by_title(self, title: str) -> Category | None:
        """Get category by title, ignoring case.

        Args:
            title: Category title.

        Returns:
            Category if found, None otherwise.
        """
        query = select(Category).where(func.lower(Category.title) == title.lower())
        result = await self.session.execute(query)
        return result.scalars().unique().first()

    async def find_reserved(self, kind: CategoryKind) -> Category | None:
        """Get the sentinel row of the given kind.

        Args:
            kind: Reserved category kind.

        Returns:
            Sentinel category if seeded, None otherwise.
        """
        query = select(Category).where(Category.kind == kind.value).order_by(Category.id)
        result = await self.session.execute(query)
        return result.scalars().unique().first()

    async def exists_by_title(self, title: str, exclude_id: int | None = None) -> bool:
        """Check if a title is already used, ignoring case.

        Args:
            title: Title to check.
            exclude_id: Category ID to leave out of the check.

        Returns:
            True if another category carries the title.
        """
        condition = func.lower(Category.title) == title.lower()
        if exclude_id is not None:
            condition = condition & (Category.id != exclude_id)

        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def detach_children(self, parent_id: int) -> int:
        """Turn the children of a category into root categories.

        Args:
            parent_id: ID of the category losing its children.

        Returns:
            Number of detached categories.
        """
        result = await self.session.execute(
            update(Category)
            .where(Category.parent_id == parent_id)
            .values(parent_id=None)
            .execution_options(synchronize_session=False)
        )
        # Bulk statements bypass the identity map
        self.session.expire_all()
        return result.rowcount


class ProductRepository:
    """Repository for Product database operations.

    Products whose category is the "Deleted" sentinel are soft-deleted:
    the *_excluding_deleted queries leave them out, the others do not.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    def _live_products(self):
        return (
            select(Product)
            .join(Category, Product.category_id == Category.id)
            .where(Category.kind != CategoryKind.DELETED.value)
        )

    async def find_all_excluding_deleted(self) -> Sequence[Product]:
        """Find all products that are not soft-deleted, ordered by ID."""
        result = await self.session.execute(self._live_products().order_by(Product.id))
        return result.scalars().unique().all()

    async def find_by_id_excluding_deleted(self, product_id: int) -> Product | None:
        """Get a product by ID unless it is soft-deleted.

        Args:
            product_id: Product ID.

        Returns:
            Product if found and live, None otherwise.
        """
        result = await self.session.execute(
            self._live_products().where(Product.id == product_id)
        )
        return result.scalars().unique().one_or_none()

    async def find_by_id(self, product_id: int) -> Product | None:
        """Get a product by ID, soft-deleted ones included.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalars().unique().one_or_none()

    async def exists_by_id(self, product_id: int) -> bool:
        """Check if a product row exists.

        Args:
            product_id: Product ID.

        Returns:
            True if the row exists.
        """
        result = await self.session.execute(
            select(exists().where(Product.id == product_id))
        )
        return bool(result.scalar())

    async def count_by_category(self, category_id: int) -> int:
        """Count products referencing a category.

        Args:
            category_id: Category ID.

        Returns:
            Number of products in the category.
        """
        result = await self.session.execute(
            select(func.count(Product.id)).where(Product.category_id == category_id)
        )
        return result.scalar_one()

    async def reassign_category(self, from_category_id: int, to_category_id: int) -> int:
        """Move every product of one category to another.

        Args:
            from_category_id: Category the products currently reference.
            to_category_id: Category they should reference afterwards.

        Returns:
            Number of reassigned products.
        """
        result = await self.session.execute(
            update(Product)
            .where(Product.category_id == from_category_id)
            .values(
                category_id=to_category_id,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        # Bulk statements bypass the identity map
        self.session.expire_all()
        return result.rowcount
