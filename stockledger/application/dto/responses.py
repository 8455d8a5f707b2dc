"""Response DTOs for API endpoints."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.inventory_log import InventoryLogEntry
from stockledger.core.entities.product import Product
from stockledger.core.entities.purchase import Purchase, PurchaseItem
from stockledger.core.entities.sale import Sale, SaleLine


class ProviderHealthResponse(BaseModel):
    """Health of a backing provider."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None
    pool: dict[str, int] | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    schema_version: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PURCHASE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: dict | str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


# --- Inventory log ---


class InventoryLogEntryResponse(BaseModel):
    """Inventory log entry response DTO."""

    id: int
    product_id: int
    action: str
    delta: int
    before_qty: int
    after_qty: int
    actor_id: int
    sale_id: int | None = None
    purchase_id: int | None = None
    note: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: InventoryLogEntry) -> "InventoryLogEntryResponse":
        return cls(
            id=entry.id,  # type: ignore[arg-type]
            product_id=entry.product_id,
            action=entry.action.value,
            delta=entry.delta,
            before_qty=entry.before_qty,
            after_qty=entry.after_qty,
            actor_id=entry.actor_id,
            sale_id=entry.sale_id,
            purchase_id=entry.purchase_id,
            note=entry.note,
            created_at=entry.created_at,
        )


class InventoryLogListResponse(PaginatedResponse):
    """Paginated inventory log response."""

    entries: list[InventoryLogEntryResponse]


# --- Products ---


class ProductResponse(BaseModel):
    """Product ledger state response DTO."""

    id: int
    code: str
    name: str
    price: Decimal
    stock: int
    avg_cost: Decimal
    last_cost: Decimal
    stock_value: Decimal
    supplier_id: int | None = None
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,  # type: ignore[arg-type]
            code=product.code,
            name=product.name,
            price=product.price,
            stock=product.stock,
            avg_cost=product.avg_cost,
            last_cost=product.last_cost,
            stock_value=product.stock_value,
            supplier_id=product.supplier_id,
            is_deleted=product.is_deleted,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(PaginatedResponse):
    """Paginated product list response."""

    products: list[ProductResponse]


class ProductMutationResponse(BaseModel):
    """Product state after a stock-affecting product operation."""

    product: ProductResponse
    log_entry: InventoryLogEntryResponse | None = None


# --- Purchases ---


class PurchaseItemResponse(BaseModel):
    """Purchase item response DTO."""

    product_id: int
    quantity: int
    unit_cost: Decimal
    line_total: Decimal

    @classmethod
    def from_entity(cls, item: PurchaseItem) -> "PurchaseItemResponse":
        return cls(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_cost=item.unit_cost,
            line_total=item.line_total,
        )


class PurchaseResponse(BaseModel):
    """Purchase response DTO."""

    id: int
    supplier_id: int | None = None
    invoice_no: str | None = None
    invoice_date: date | None = None
    status: str
    items: list[PurchaseItemResponse]
    sub_total: Decimal
    discount: Decimal
    tax: Decimal
    grand_total: Decimal
    note: str | None = None
    created_by: int | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, purchase: Purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id,  # type: ignore[arg-type]
            supplier_id=purchase.supplier_id,
            invoice_no=purchase.invoice_no,
            invoice_date=purchase.invoice_date,
            status=purchase.status.value,
            items=[PurchaseItemResponse.from_entity(i) for i in purchase.items],
            sub_total=purchase.sub_total,
            discount=purchase.discount,
            tax=purchase.tax,
            grand_total=purchase.grand_total,
            note=purchase.note,
            created_by=purchase.created_by,
            cancelled_at=purchase.cancelled_at,
            cancel_reason=purchase.cancel_reason,
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )


class PurchaseListResponse(PaginatedResponse):
    """Paginated purchase list response."""

    purchases: list[PurchaseResponse]


class PurchaseTransitionResponse(BaseModel):
    """Response for post/cancel: the purchase and the log entries written."""

    purchase: PurchaseResponse
    log_entries: list[InventoryLogEntryResponse] = Field(default_factory=list)
    bound_product_ids: list[int] = Field(default_factory=list)


# --- Sales ---


class SaleLineResponse(BaseModel):
    """Sale line response DTO."""

    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @classmethod
    def from_entity(cls, line: SaleLine) -> "SaleLineResponse":
        return cls(
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line.total_price,
        )


class SaleResponse(BaseModel):
    """Sale response DTO."""

    id: int
    sale_code: str
    customer_id: int | None = None
    sale_date: date
    lines: list[SaleLineResponse]
    total_amount: Decimal
    discount: Decimal
    discounted_amount: Decimal
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, sale: Sale) -> "SaleResponse":
        return cls(
            id=sale.id,  # type: ignore[arg-type]
            sale_code=sale.sale_code or "",
            customer_id=sale.customer_id,
            sale_date=sale.sale_date,
            lines=[SaleLineResponse.from_entity(line) for line in sale.lines],
            total_amount=sale.total_amount,
            discount=sale.discount,
            discounted_amount=sale.discounted_amount,
            created_by=sale.created_by,
            updated_by=sale.updated_by,
            created_at=sale.created_at,
            updated_at=sale.updated_at,
        )


class SaleListResponse(PaginatedResponse):
    """Paginated sale list response."""

    sales: list[SaleResponse]


class SaleMutationResponse(BaseModel):
    """Response for sale create/update: the sale and the log entries written."""

    sale: SaleResponse
    log_entries: list[InventoryLogEntryResponse] = Field(default_factory=list)


class DeleteSaleResponse(BaseModel):
    """Response for sale deletion."""

    sale_id: int
    sale_code: str
    log_entries: list[InventoryLogEntryResponse] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Generic deletion acknowledgement."""

    id: int
    deleted: bool = True
