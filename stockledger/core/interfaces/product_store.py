"""Abstract interface for product ledger state persistence."""

from abc import ABC, abstractmethod
from decimal import Decimal

from stockledger.core.entities.product import Product


class IProductStore(ABC):
    """Reads products and writes back stock, costs and supplier binding.

    Every stock write returns the quantity stored after the write so callers
    can log the true before/after pair of that specific mutation.
    """

    @abstractmethod
    async def get(self, product_id: int) -> Product | None:
        """Get product by ID (archived products included)."""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Product | None:
        """Get product by its unique code."""
        pass

    @abstractmethod
    async def list_products(
        self, limit: int = 100, offset: int = 0, include_deleted: bool = False
    ) -> list[Product]:
        """List products ordered by code."""
        pass

    @abstractmethod
    async def count_products(self, include_deleted: bool = False) -> int:
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Insert a new product. Raises DuplicateProductCodeError."""
        pass

    @abstractmethod
    async def set_deleted(self, product_id: int, deleted: bool) -> bool:
        """Toggle the soft-delete flag. Returns False if nothing changed."""
        pass

    @abstractmethod
    async def bind_supplier(self, product_id: int, supplier_id: int) -> bool:
        """Bind a supplier only if the product has none. Returns True if bound."""
        pass

    @abstractmethod
    async def apply_receipt(
        self, product_id: int, quantity: int, avg_cost: Decimal, last_cost: Decimal
    ) -> int:
        """Add received quantity and store the new costs. Returns new stock."""
        pass

    @abstractmethod
    async def decrement_if_available(self, product_id: int, quantity: int) -> int | None:
        """Atomically take quantity out of stock if enough is on hand.

        Returns the new stock, or None when stock < quantity (nothing written).
        """
        pass

    @abstractmethod
    async def increment(self, product_id: int, quantity: int) -> int:
        """Put quantity back into stock. Returns new stock."""
        pass

    @abstractmethod
    async def set_stock(self, product_id: int, stock: int) -> int:
        """Overwrite stock with a counted quantity. Returns new stock."""
        pass
