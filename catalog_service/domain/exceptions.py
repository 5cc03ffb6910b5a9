"""Domain exceptions.

All catalog-level errors that represent business rule violations.
These exceptions are raised by the application services when a
caller supplies invalid data, references a record that does not
exist, or when the store is missing its reserved categories.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the transport layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when caller-supplied data violates a field or uniqueness rule.

    Always recoverable by resubmitting corrected data.
    """

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Human-readable error message.
            field: Transport name of the offending field, if any.
        """
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class ReservedCategoryError(ValidationError):
    """Raised when trying to delete one of the reserved categories."""

    error_code = "RESERVED_CATEGORY"

    def __init__(self, category_id: int, title: str) -> None:
        """Initialize reserved category error.

        Args:
            category_id: ID of the reserved category.
            title: Title of the reserved category.
        """
        super().__init__(f"Reserved categories cannot be deleted: '{title}'")
        self.details = {"category_id": category_id, "title": title}


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Base class for unresolved identifiers."""

    error_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when a product id does not resolve to a live product."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int | None) -> None:
        super().__init__(
            f"Product with id: {product_id} not found",
            details={"product_id": product_id},
        )


class CategoryNotFoundError(NotFoundError):
    """Raised when a category id does not resolve to a usable category."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: int | None) -> None:
        super().__init__(
            f"Category with id: {category_id} not found",
            details={"category_id": category_id},
        )


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(DomainError):
    """Raised when a reserved category is missing from the store.

    This is a deployment defect, not a caller error: the store must be
    re-seeded before the operation can succeed.
    """

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, kind: str) -> None:
        """Initialize configuration error.

        Args:
            kind: Kind of the missing reserved category.
        """
        super().__init__(
            f"Reserved category '{kind}' is missing from the database",
            details={"kind": kind},
        )
