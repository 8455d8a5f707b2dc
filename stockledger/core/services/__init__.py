"""Domain services."""

from stockledger.core.services.costing import weighted_average_cost
from stockledger.core.services.sale_codes import SaleCodeAllocator, format_sale_code
from stockledger.core.services.stock_ledger import StockLedger, load_active_products
from stockledger.core.services.supplier_binding import (
    SupplierBindingEnforcer,
    find_binding_conflicts,
)

__all__ = [
    "weighted_average_cost",
    "SaleCodeAllocator",
    "format_sale_code",
    "StockLedger",
    "load_active_products",
    "SupplierBindingEnforcer",
    "find_binding_conflicts",
]
