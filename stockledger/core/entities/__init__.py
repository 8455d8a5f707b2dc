"""Domain entities."""

from stockledger.core.entities.actor import Actor, ActorRole
from stockledger.core.entities.inventory_log import (
    InventoryAction,
    InventoryLogEntry,
    InventoryLogFilter,
)
from stockledger.core.entities.product import Product
from stockledger.core.entities.purchase import (
    ALLOWED_TRANSITIONS,
    Purchase,
    PurchaseItem,
    PurchaseStatus,
)
from stockledger.core.entities.sale import Sale, SaleLine

__all__ = [
    "Actor",
    "ActorRole",
    "InventoryAction",
    "InventoryLogEntry",
    "InventoryLogFilter",
    "Product",
    "ALLOWED_TRANSITIONS",
    "Purchase",
    "PurchaseItem",
    "PurchaseStatus",
    "Sale",
    "SaleLine",
]
