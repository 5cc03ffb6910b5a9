"""Shared fixtures for API tests."""

import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def electronics_id(client: AsyncClient) -> int:
    """Create an "Electronics" category through the API."""
    response = await client.post(
        "/api/categories",
        json={"categoryTitle": "Electronics", "imageUrl": "https://example.com/e.jpg"},
    )
    assert response.status_code == 200
    return response.json()["categoryId"]
