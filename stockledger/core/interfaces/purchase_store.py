"""Abstract interface for purchase persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.core.entities.purchase import Purchase, PurchaseStatus


class IPurchaseStore(ABC):
    """Interface for purchases and their item lines."""

    @abstractmethod
    async def create(self, purchase: Purchase) -> Purchase:
        """Create a purchase with its items."""
        pass

    @abstractmethod
    async def get(self, purchase_id: int) -> Purchase | None:
        """Get purchase with items by ID."""
        pass

    @abstractmethod
    async def update(self, purchase: Purchase) -> Purchase:
        """Replace header fields and items of a draft."""
        pass

    @abstractmethod
    async def delete(self, purchase_id: int) -> bool:
        """Hard-delete a purchase and its items."""
        pass

    @abstractmethod
    async def update_status(self, purchase: Purchase, expected: PurchaseStatus) -> bool:
        """Persist purchase.status (and cancel fields) only if the stored status
        still equals expected. Returns False when another writer got there first."""
        pass

    @abstractmethod
    async def list_purchases(
        self,
        supplier_id: int | None = None,
        status: PurchaseStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Purchase]:
        """List purchases newest first."""
        pass

    @abstractmethod
    async def count_purchases(
        self,
        supplier_id: int | None = None,
        status: PurchaseStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> int:
        """Count purchases matching the same filters as list_purchases."""
        pass
