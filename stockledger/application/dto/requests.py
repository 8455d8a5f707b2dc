"""Request DTOs for API endpoints.

Pydantic v2 models for API request parsing.
These are the ONLY contracts between API and use cases. They only check
types; business validation (quantities, discounts, non-empty lines) is done
by the use cases so it surfaces as a ledger ValidationError.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

# --- Products ---


class RegisterProductRequest(BaseModel):
    """Request to register a product with its opening stock."""

    code: str = Field(..., description="Unique product code", examples=["SKU-001"])
    name: str = Field(..., description="Product name")
    price: Decimal = Field(default=Decimal("0"), description="Selling price per unit")
    stock: int = Field(default=0, description="Opening stock quantity")
    supplier_id: int | None = Field(default=None, description="Supplier to bind")


class AdjustStockRequest(BaseModel):
    """Request to correct stock to a counted quantity."""

    quantity: int = Field(..., description="Counted quantity (absolute, not a delta)")
    note: str | None = Field(default=None, description="Reason for the correction")


# --- Purchases ---


class PurchaseItemRequest(BaseModel):
    """A single received product line."""

    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity received")
    unit_cost: Decimal = Field(..., description="Cost per unit")


class CreatePurchaseRequest(BaseModel):
    """Request to create a purchase draft."""

    supplier_id: int | None = Field(default=None, description="Supplier ID")
    invoice_no: str | None = Field(default=None, description="Supplier invoice number")
    invoice_date: date | None = Field(default=None, description="Supplier invoice date")
    items: list[PurchaseItemRequest] = Field(default_factory=list)
    discount: Decimal = Field(default=Decimal("0"), description="Header discount amount")
    tax: Decimal = Field(default=Decimal("0"), description="Header tax amount")
    note: str | None = Field(default=None, description="Free-text note")


class UpdatePurchaseRequest(CreatePurchaseRequest):
    """Request to replace a draft's header and items."""

    pass


class CancelPurchaseRequest(BaseModel):
    """Request to cancel a posted purchase."""

    reason: str | None = Field(default=None, description="Cancellation reason")


# --- Sales ---


class SaleLineRequest(BaseModel):
    """A single sold product line. The unit price is taken from the product."""

    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity sold")


class CreateSaleRequest(BaseModel):
    """Request to create a sale."""

    customer_id: int | None = Field(default=None, description="Customer ID")
    sale_date: date | None = Field(default=None, description="Sale date (defaults to today, UTC)")
    discount: Decimal = Field(default=Decimal("0"), description="Discount percent (0-100)")
    lines: list[SaleLineRequest] = Field(default_factory=list)


class UpdateSaleRequest(BaseModel):
    """Request to replace a sale's lines. Header fields change only when given."""

    customer_id: int | None = Field(default=None, description="Customer ID")
    sale_date: date | None = Field(default=None, description="Sale date")
    discount: Decimal | None = Field(default=None, description="Discount percent (0-100)")
    lines: list[SaleLineRequest] = Field(default_factory=list)
