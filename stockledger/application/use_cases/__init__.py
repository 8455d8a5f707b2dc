"""Application use cases."""

from stockledger.application.use_cases.adjust_stock import AdjustStockUseCase
from stockledger.application.use_cases.cancel_purchase import CancelPurchaseUseCase
from stockledger.application.use_cases.create_purchase_draft import (
    CreatePurchaseDraftUseCase,
    PurchaseDraftResult,
)
from stockledger.application.use_cases.create_sale import CreateSaleUseCase, SaleMutationResult
from stockledger.application.use_cases.delete_purchase_draft import DeletePurchaseDraftUseCase
from stockledger.application.use_cases.delete_sale import DeleteSaleResult, DeleteSaleUseCase
from stockledger.application.use_cases.ledger_queries import LedgerQueries
from stockledger.application.use_cases.manage_product import (
    ArchiveProductUseCase,
    ProductMutationResult,
    RegisterProductUseCase,
    RestoreProductUseCase,
)
from stockledger.application.use_cases.post_purchase import (
    PostPurchaseUseCase,
    PurchaseTransitionResult,
)
from stockledger.application.use_cases.update_purchase_draft import UpdatePurchaseDraftUseCase
from stockledger.application.use_cases.update_sale import UpdateSaleUseCase

__all__ = [
    "AdjustStockUseCase",
    "ArchiveProductUseCase",
    "CancelPurchaseUseCase",
    "CreatePurchaseDraftUseCase",
    "CreateSaleUseCase",
    "DeletePurchaseDraftUseCase",
    "DeleteSaleResult",
    "DeleteSaleUseCase",
    "LedgerQueries",
    "PostPurchaseUseCase",
    "ProductMutationResult",
    "PurchaseDraftResult",
    "PurchaseTransitionResult",
    "RegisterProductUseCase",
    "RestoreProductUseCase",
    "SaleMutationResult",
    "UpdatePurchaseDraftUseCase",
    "UpdateSaleUseCase",
]
