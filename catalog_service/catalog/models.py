"""SQLAlchemy models for the product catalog.

Defines Category and Product tables for persistent storage.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_service.infrastructure.database import Base


class UtcDateTime(TypeDecorator):
    """Timezone-aware timestamp that always reads back in UTC.

    Some backends (SQLite) drop the offset on storage; naive values read
    from them are taken to be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class CategoryKind(str, Enum):
    """Role of a category row.

    Reserved kinds mark the sentinel rows that products are moved to
    instead of being removed.
    """

    NORMAL = "normal"
    DELETED = "deleted"
    UNCATEGORIZED = "uncategorized"

    @property
    def is_reserved(self) -> bool:
        """Check if this kind marks a sentinel row."""
        return self is not CategoryKind.NORMAL


# Titles given to the sentinel rows when they are seeded
RESERVED_TITLES: dict[CategoryKind, str] = {
    CategoryKind.DELETED: "Deleted",
    CategoryKind.UNCATEGORIZED: "No category",
}


class Category(Base):
    """Category in the catalog tree.

    Attributes:
        id: Unique category identifier.
        title: Category title, unique case-insensitively.
        image_url: Category image URL.
        parent_id: Optional parent category ID (None for roots).
        kind: Normal category or one of the reserved sentinels.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )
    kind: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CategoryKind.NORMAL.value,
        index=True,
    )

    # Relationships
    parent: Mapped["Category | None"] = relationship(
        "Category",
        remote_side=[id],
        lazy="joined",
        join_depth=1,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, title={self.title}, kind={self.kind})>"

    @property
    def is_reserved(self) -> bool:
        """Check if this row is one of the sentinels."""
        return CategoryKind(self.kind).is_reserved


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier.
        title: Product title.
        image_url: Product image URL.
        sku: Stock Keeping Unit (unique).
        unit_price: Price per unit.
        quantity: Available quantity.
        category_id: Owning category; a sentinel once the product is deleted.
        created_at: Creation timestamp, never rewritten.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    sku: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)

    # Relationships
    category: Mapped["Category"] = relationship("Category", lazy="joined")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, sku={self.sku}, title={self.title[:30]}...)>"
