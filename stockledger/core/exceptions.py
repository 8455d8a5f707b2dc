"""
Domain exceptions for the inventory ledger.

Every business-rule failure is raised inside a unit of work so the surrounding
transaction rolls back. Each family maps to one HTTP status in the API layer.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Not found
class NotFoundError(LedgerError):
    """Referenced record does not exist."""

    pass


class PurchaseNotFoundError(NotFoundError):
    """Purchase not found."""

    def __init__(self, purchase_id: int):
        super().__init__(
            f"Purchase not found: {purchase_id}",
            code="PURCHASE_NOT_FOUND",
            details={"purchase_id": purchase_id},
        )


class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, product_id: int, index: int | None = None):
        message = f"Product not found: {product_id}"
        if index is not None:
            message = f"Product not found for item at index {index}: {product_id}"
        super().__init__(
            message,
            code="PRODUCT_NOT_FOUND",
            details={"product_id": product_id, "index": index},
        )


class SaleNotFoundError(NotFoundError):
    """Sale not found."""

    def __init__(self, sale_id: int):
        super().__init__(
            f"Sale not found: {sale_id}",
            code="SALE_NOT_FOUND",
            details={"sale_id": sale_id},
        )


# Conflict
class ConflictError(LedgerError):
    """Operation conflicts with the current state of a record."""

    pass


class InvalidPurchaseStateError(ConflictError):
    """Purchase is not in the state the operation requires."""

    def __init__(self, purchase_id: int, status: str, message: str):
        super().__init__(
            message,
            code="INVALID_PURCHASE_STATE",
            details={"purchase_id": purchase_id, "status": status},
        )


class ProductDeletedError(ConflictError):
    """Product is soft-deleted and cannot take new stock mutations."""

    def __init__(self, product_id: int, index: int | None = None):
        where = f" for item at index {index}" if index is not None else ""
        super().__init__(
            f"Product {product_id} is deleted{where}. Restore it to continue.",
            code="PRODUCT_SOFT_DELETED",
            details={"product_id": product_id, "index": index},
        )


class DuplicateProductCodeError(ConflictError):
    """Product code is already in use."""

    def __init__(self, code: str):
        super().__init__(
            f"Product code already exists: {code}",
            code="DUPLICATE_PRODUCT_CODE",
            details={"product_code": code},
        )


class SaleCodeConflictError(ConflictError):
    """Sale code collided with an existing sale."""

    def __init__(self, sale_code: str):
        super().__init__(
            f"Sale code already exists: {sale_code}",
            code="SALE_CODE_CONFLICT",
            details={"sale_code": sale_code},
        )


class SaleCodeExhaustedError(ConflictError):
    """Could not allocate a free sale code."""

    def __init__(self, day: str, attempts: int):
        super().__init__(
            f"Could not allocate a sale code for {day} after {attempts} attempts",
            code="SALE_CODE_EXHAUSTED",
            details={"day": day, "attempts": attempts},
        )


# Business rule violations
class UnprocessableEntityError(LedgerError):
    """Request is well-formed but violates a business rule."""

    pass


class SupplierBindingError(UnprocessableEntityError):
    """Product is already bound to a different supplier."""

    def __init__(self, supplier_id: int, conflicts: list[dict[str, Any]]):
        products = ", ".join(str(c["product_id"]) for c in conflicts)
        super().__init__(
            f"Products already bound to another supplier: {products}",
            code="SUPPLIER_BINDING_CONFLICT",
            details={"supplier_id": supplier_id, "conflicts": conflicts},
        )


class InsufficientStockToReverseError(UnprocessableEntityError):
    """Cancelling a purchase would drive stock negative."""

    def __init__(self, product_id: int, product_name: str, available: int, required: int):
        super().__init__(
            f"Cannot cancel: product {product_name} has only {available} in stock, "
            f"needs {required} to reverse",
            code="INSUFFICIENT_STOCK_TO_REVERSE",
            details={
                "product_id": product_id,
                "available": available,
                "required": required,
            },
        )


class InsufficientStockError(LedgerError):
    """Not enough stock to fulfil a sale line."""

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {product_name}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


class PermissionDeniedError(LedgerError):
    """Actor role does not allow the operation."""

    def __init__(self, operation: str, required_role: str = "admin"):
        super().__init__(
            f"Only {required_role} can {operation}",
            code="PERMISSION_DENIED",
            details={"operation": operation, "required_role": required_role},
        )


# Validation
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Storage
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class MigrationError(StorageError):
    """Schema migration could not be applied."""

    def __init__(self, version: str, error: str):
        super().__init__(
            f"Migration v{version} failed: {error}",
            code="MIGRATION_ERROR",
            details={"version": version, "error": error},
        )
