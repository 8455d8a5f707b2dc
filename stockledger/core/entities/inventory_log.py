"""Append-only inventory audit log entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class InventoryAction(str, Enum):
    """Operation that caused a stock change."""

    PURCHASE_POST = "purchase.post"
    PURCHASE_CANCEL = "purchase.cancel"
    SALE_CREATE = "sale.create"
    SALE_UPDATE_RESTORE = "sale.update.restore"
    SALE_UPDATE_APPLY = "sale.update.apply"
    SALE_DELETE_RESTORE = "sale.delete.restore"
    PRODUCT_CREATE = "product.create"
    STOCK_ADJUST = "stock.adjust"


class InventoryLogEntry(BaseModel):
    """Immutable record of one stock delta with before/after quantities."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    product_id: int
    action: InventoryAction
    delta: int  # negative for out, positive for in
    before_qty: int
    after_qty: int
    actor_id: int
    sale_id: int | None = None
    purchase_id: int | None = None
    note: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def check_balance(self) -> "InventoryLogEntry":
        if self.after_qty != self.before_qty + self.delta:
            raise ValueError(
                f"after_qty ({self.after_qty}) must equal before_qty "
                f"({self.before_qty}) + delta ({self.delta})"
            )
        return self


class InventoryLogFilter(BaseModel):
    """Query filter for reading the log, newest first."""

    product_id: int | None = None
    action: InventoryAction | None = None
    actor_id: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int = 50
    offset: int = 0

    @field_validator("date_from", "date_to")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        # Naive bounds are UTC, matching how the log stores timestamps
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
