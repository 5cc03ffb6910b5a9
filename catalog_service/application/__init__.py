"""Application layer module.

Contains application services (use cases) that keep categories and
products consistent on top of the repositories.
"""

from catalog_service.application.category_service import (
    CategoryService,
    get_category_service,
)
from catalog_service.application.product_service import (
    ProductService,
    get_product_service,
)

__all__ = [
    "CategoryService",
    "get_category_service",
    "ProductService",
    "get_product_service",
]
