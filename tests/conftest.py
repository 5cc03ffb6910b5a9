"""Shared fixtures for catalog tests.

Every test gets its own in-memory SQLite database with the reserved
categories already seeded.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_RESERVED_CATEGORIES", "false")

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog_service.application.category_service import CategoryService
from catalog_service.application.product_service import ProductService
from catalog_service.catalog.dto import CategoryDto
from catalog_service.catalog.models import CategoryKind
from catalog_service.catalog.repository import CategoryRepository
from catalog_service.infrastructure.database import Base, get_session
from catalog_service.main import app


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory database with the catalog tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Open a session on a database seeded with the reserved categories."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await CategoryService(session).ensure_reserved()
        yield session


@pytest_asyncio.fixture
async def reserved(session: AsyncSession) -> dict[CategoryKind, int]:
    """Get the IDs of the reserved categories."""
    repo = CategoryRepository(session)
    return {
        kind: (await repo.find_reserved(kind)).id
        for kind in (CategoryKind.DELETED, CategoryKind.UNCATEGORIZED)
    }


@pytest_asyncio.fixture
async def category_service(session: AsyncSession) -> CategoryService:
    """Create category service on the test session."""
    return CategoryService(session, request_id="test-request")


@pytest_asyncio.fixture
async def product_service(session: AsyncSession) -> ProductService:
    """Create product service on the test session."""
    return ProductService(session, request_id="test-request")


@pytest_asyncio.fixture
async def electronics(category_service: CategoryService) -> CategoryDto:
    """Create an "Electronics" category."""
    return await category_service.save(
        CategoryDto(
            category_title="Electronics",
            image_url="https://example.com/electronics.jpg",
        )
    )


@pytest_asyncio.fixture
async def client(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an API client bound to the test database session."""

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

    app.dependency_overrides[get_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
