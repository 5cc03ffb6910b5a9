"""Domain layer - catalog error taxonomy.

Example usage:
    from catalog_service.domain import CategoryNotFoundError

    raise CategoryNotFoundError(42)
"""

from catalog_service.domain.exceptions import (
    CategoryNotFoundError,
    ConfigurationError,
    DomainError,
    NotFoundError,
    ProductNotFoundError,
    ReservedCategoryError,
    ValidationError,
)

__all__ = [
    "CategoryNotFoundError",
    "ConfigurationError",
    "DomainError",
    "NotFoundError",
    "ProductNotFoundError",
    "ReservedCategoryError",
    "ValidationError",
]
