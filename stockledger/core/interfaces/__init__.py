"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.inventory_log_store import IInventoryLogStore
from stockledger.core.interfaces.product_store import IProductStore
from stockledger.core.interfaces.purchase_store import IPurchaseStore
from stockledger.core.interfaces.sale_store import ISaleStore
from stockledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory

__all__ = [
    "IInventoryLogStore",
    "IProductStore",
    "IPurchaseStore",
    "ISaleStore",
    "IUnitOfWork",
    "UnitOfWorkFactory",
]
