"""Abstract interface for sale persistence."""

from abc import ABC, abstractmethod
from datetime import date

from stockledger.core.entities.sale import Sale


class ISaleStore(ABC):
    """Interface for sales, their lines and the per-day code sequence."""

    @abstractmethod
    async def next_sequence(self, day: date) -> int:
        """Allocate the next sale number for a calendar day."""
        pass

    @abstractmethod
    async def create(self, sale: Sale) -> Sale:
        """Create a sale with its lines. Raises SaleCodeConflictError."""
        pass

    @abstractmethod
    async def get(self, sale_id: int) -> Sale | None:
        """Get sale with lines by ID."""
        pass

    @abstractmethod
    async def update(self, sale: Sale) -> Sale:
        """Replace header fields and lines."""
        pass

    @abstractmethod
    async def delete(self, sale_id: int) -> bool:
        """Hard-delete a sale and its lines."""
        pass

    @abstractmethod
    async def list_sales(self, limit: int = 50, offset: int = 0) -> list[Sale]:
        """List sales newest first."""
        pass

    @abstractmethod
    async def count_sales(self) -> int:
        pass
