"""Product catalog persistence and mapping.

Provides the Category and Product models, their repositories and the
conversions to and from the transport records.
"""

from catalog_service.catalog.dto import CategoryDto, ProductDto
from catalog_service.catalog.models import RESERVED_TITLES, Category, CategoryKind, Product
from catalog_service.catalog.repository import CategoryRepository, ProductRepository

__all__ = [
    # Models
    "Category",
    "CategoryKind",
    "Product",
    "RESERVED_TITLES",
    # Records
    "CategoryDto",
    "ProductDto",
    # Repositories
    "CategoryRepository",
    "ProductRepository",
]
