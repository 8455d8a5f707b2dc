"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from stockledger.infrastructure.storage.sqlite.inventory_log_store import (
    SQLiteInventoryLogStore,
)
from stockledger.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from stockledger.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from stockledger.infrastructure.storage.sqlite.sale_store import SQLiteSaleStore
from stockledger.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork


def get_unit_of_work(readonly: bool = False) -> SQLiteUnitOfWork:
    """Create a fresh unit of work on the global pool."""
    return SQLiteUnitOfWork(readonly=readonly)


def get_readonly_unit_of_work() -> SQLiteUnitOfWork:
    return SQLiteUnitOfWork(readonly=True)


__all__ = [
    "ConnectionPool",
    "close_pool",
    "get_pool",
    "SQLiteInventoryLogStore",
    "SQLiteProductStore",
    "SQLitePurchaseStore",
    "SQLiteSaleStore",
    "SQLiteUnitOfWork",
    "get_unit_of_work",
    "get_readonly_unit_of_work",
]
