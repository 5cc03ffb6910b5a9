"""Category application service.

Keeps category rows consistent with the products that reference them:
- Enforcing case-insensitive title uniqueness
- Resolving parent references
- Protecting the reserved categories from deletion
- Moving orphaned products to "No category" before a category is removed
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.dto import CategoryDto
from catalog_service.catalog.mapping import category_from_dto, category_to_dto, parent_id_of
from catalog_service.catalog.models import RESERVED_TITLES, Category, CategoryKind
from catalog_service.catalog.repository import CategoryRepository, ProductRepository
from catalog_service.domain.exceptions import (
    CategoryNotFoundError,
    ConfigurationError,
    ReservedCategoryError,
    ValidationError,
)

logger = structlog.get_logger()


async def resolve_reserved(repo: CategoryRepository, kind: CategoryKind) -> Category:
    """Get a sentinel category or fail as a configuration fault.

    Args:
        repo: Category repository.
        kind: Reserved kind to look up.

    Returns:
        The sentinel category.

    Raises:
        ConfigurationError: If the sentinel was never seeded.
    """
    sentinel = await repo.find_reserved(kind)
    if sentinel is None:
        logger.error("Reserved category missing", kind=kind.value)
        raise ConfigurationError(kind.value)
    return sentinel


class CategoryService:
    """Application service for managing categories.

    Every mutating operation is a single unit of work committed once at
    its end; a raised error leaves nothing committed.
    """

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
        self.categories = CategoryRepository(session)
        self.products = ProductRepository(session)
        self.request_id = request_id

    async def list_all(self) -> list[CategoryDto]:
        """List all categories except the reserved ones.

        Returns:
            Categories ordered by ID.
        """
        logger.info("Listing categories", request_id=self.request_id)
        categories = await self.categories.find_all_excluding_reserved()
        return [category_to_dto(c) for c in categories]

    async def get_by_id(self, category_id: int) -> CategoryDto:
        """Get a category by ID.

        Args:
            category_id: Category identifier.

        Returns:
            The category.

        Raises:
            CategoryNotFoundError: If absent or reserved.
        """
        logger.info("Fetching category", category_id=category_id, request_id=self.request_id)
        category = await self.categories.find_by_id_excluding_reserved(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category_to_dto(category)

    async def save(self, candidate: CategoryDto) -> CategoryDto:
        """Create a category.

        The candidate's ID is ignored; the store assigns a fresh one.

        Args:
            candidate: Category to create.

        Returns:
            The stored category.

        Raises:
            ValidationError: If the title is empty or already used.
            CategoryNotFoundError: If the parent does not resolve.
        """
        title = await self._validate_title(candidate.category_title)
        parent = await self._resolve_parent(candidate)

        category = category_from_dto(candidate)
        category.id = None
        category.title = title
        category.parent = parent
        category.kind = CategoryKind.NORMAL.value
        await self.categories.save(category)
        await self.session.commit()

        logger.info(
            "Category created",
            category_id=category.id,
            title=category.title,
            parent_id=category.parent_id,
            request_id=self.request_id,
        )
        return category_to_dto(category)

    async def update(self, candidate: CategoryDto) -> CategoryDto:
        """Update the category identified by the candidate's own ID.

        Args:
            candidate: Full category record including its ID.

        Returns:
            The updated category.

        Raises:
            CategoryNotFoundError: If the ID is missing or unknown.
            ValidationError: If the title is empty or used elsewhere.
        """
        if candidate.category_id is None:
            raise CategoryNotFoundError(None)
        return await self.update_by_id(candidate.category_id, candidate)

    async def update_by_id(self, category_id: int, candidate: CategoryDto) -> CategoryDto:
        """Update a category's title, image and parent.

        The parent is cleared when the candidate carries none.

        Args:
            category_id: Category identifier.
            candidate: New field values.

        Returns:
            The updated category.

        Raises:
            CategoryNotFoundError: If the category or its new parent is unknown.
            ValidationError: If the title is empty or used elsewhere.
        """
        category = await self.categories.find_by_id_excluding_reserved(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        title = await self._validate_title(candidate.category_title, exclude_id=category_id)
        parent = await self._resolve_parent(candidate)

        category.title = title
        category.image_url = candidate.image_url
        category.parent = parent
        await self.categories.save(category)
        await self.session.commit()

        logger.info(
            "Category updated",
            category_id=category_id,
            title=title,
            parent_id=category.parent_id,
            request_id=self.request_id,
        )
        return category_to_dto(category)

    async def delete_by_id(self, category_id: int) -> None:
        """Delete a category after moving its products to "No category".

        Reassignment, child detachment and row removal are committed
        together.

        Args:
            category_id: Category identifier.

        Raises:
            ReservedCategoryError: If the category is a sentinel.
            CategoryNotFoundError: If the category does not exist.
            ConfigurationError: If "No category" was never seeded.
        """
        category = await self.categories.find_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        if category.is_reserved:
            logger.warning(
                "Refusing to delete reserved category",
                category_id=category_id,
                title=category.title,
                request_id=self.request_id,
            )
            raise ReservedCategoryError(category_id, category.title)

        uncategorized = await resolve_reserved(self.categories, CategoryKind.UNCATEGORIZED)
        uncategorized_id = uncategorized.id

        moved = await self.products.reassign_category(category_id, uncategorized_id)
        detached = await self.categories.detach_children(category_id)
        await self.categories.delete(category)
        await self.session.commit()

        logger.info(
            "Category deleted",
            category_id=category_id,
            products_reassigned=moved,
            children_detached=detached,
            reassigned_to=uncategorized_id,
            request_id=self.request_id,
        )

    async def ensure_reserved(self) -> list[CategoryDto]:
        """Create whichever reserved category is missing.

        Returns:
            Reserved categories that were created by this call.
        """
        created: list[Category] = []
        for kind, title in RESERVED_TITLES.items():
            if await self.categories.find_reserved(kind) is not None:
                continue
            sentinel = Category(title=title, image_url="", parent=None, kind=kind.value)
            await self.categories.save(sentinel)
            created.append(sentinel)

        await self.session.commit()

        if created:
            logger.info(
                "Reserved categories seeded",
                titles=[c.title for c in created],
            )
        return [category_to_dto(c) for c in created]

    async def _validate_title(self, title: str | None, exclude_id: int | None = None) -> str:
        """Check a title is present and not used by another category."""
        if not title:
            raise ValidationError("Category title is required", field="categoryTitle")
        if await self.categories.exists_by_title(title, exclude_id=exclude_id):
            raise ValidationError(
                f"Category title already exists: '{title}'", field="categoryTitle"
            )
        return title

    async def _resolve_parent(self, candidate: CategoryDto) -> Category | None:
        """Load the parent referenced by a candidate, if any."""
        parent_id = parent_id_of(candidate)
        if parent_id is None:
            return None
        parent = await self.categories.find_by_id_excluding_reserved(parent_id)
        if parent is None:
            raise CategoryNotFoundError(parent_id)
        return parent


# ============================================================================
# Service Factory
# ============================================================================


def get_category_service(
    session: AsyncSession,
    request_id: str | None = None,
) -> CategoryService:
    """Get category service instance.

    Args:
        session: Async SQLAlchemy session.
        request_id: Request ID for correlation.

    Returns:
        CategoryService instance.
    """
    return CategoryService(session, request_id=request_id)
