"""Data Transfer Objects for API layer.

Request DTOs: parse incoming API requests.
Response DTOs: structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    AdjustStockRequest,
    CancelPurchaseRequest,
    CreatePurchaseRequest,
    CreateSaleRequest,
    PurchaseItemRequest,
    RegisterProductRequest,
    SaleLineRequest,
    UpdatePurchaseRequest,
    UpdateSaleRequest,
)
from stockledger.application.dto.responses import (
    DeleteResponse,
    DeleteSaleResponse,
    ErrorResponse,
    HealthResponse,
    InventoryLogEntryResponse,
    InventoryLogListResponse,
    PaginatedResponse,
    ProductListResponse,
    ProductMutationResponse,
    ProductResponse,
    ProviderHealthResponse,
    PurchaseItemResponse,
    PurchaseListResponse,
    PurchaseResponse,
    PurchaseTransitionResponse,
    SaleLineResponse,
    SaleListResponse,
    SaleMutationResponse,
    SaleResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CancelPurchaseRequest",
    "CreatePurchaseRequest",
    "CreateSaleRequest",
    "PurchaseItemRequest",
    "RegisterProductRequest",
    "SaleLineRequest",
    "UpdatePurchaseRequest",
    "UpdateSaleRequest",
    # Responses
    "DeleteResponse",
    "DeleteSaleResponse",
    "ErrorResponse",
    "HealthResponse",
    "InventoryLogEntryResponse",
    "InventoryLogListResponse",
    "PaginatedResponse",
    "ProductListResponse",
    "ProductMutationResponse",
    "ProductResponse",
    "ProviderHealthResponse",
    "PurchaseItemResponse",
    "PurchaseListResponse",
    "PurchaseResponse",
    "PurchaseTransitionResponse",
    "SaleLineResponse",
    "SaleListResponse",
    "SaleMutationResponse",
    "SaleResponse",
]
