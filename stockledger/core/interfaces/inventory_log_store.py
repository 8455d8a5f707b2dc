"""Abstract interface for the append-only inventory log."""

from abc import ABC, abstractmethod

from stockledger.core.entities.inventory_log import InventoryLogEntry, InventoryLogFilter


class IInventoryLogStore(ABC):
    """Append and read inventory log entries. There is no update or delete."""

    @abstractmethod
    async def append(self, entry: InventoryLogEntry) -> InventoryLogEntry:
        """Append an entry. Returns a copy carrying its ID."""
        pass

    @abstractmethod
    async def query(self, log_filter: InventoryLogFilter) -> list[InventoryLogEntry]:
        """Read entries newest first."""
        pass

    @abstractmethod
    async def count(self, log_filter: InventoryLogFilter) -> int:
        """Count entries matching the filter, ignoring limit/offset."""
        pass
