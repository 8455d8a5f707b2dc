"""Purchase domain entities and lifecycle."""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from stockledger.core.exceptions import InvalidPurchaseStateError
from stockledger.core.money import ZERO, money


class PurchaseStatus(str, Enum):
    """Lifecycle states of a purchase. Only POSTED has a stock effect."""

    DRAFT = "draft"
    POSTED = "posted"
    CANCELLED = "cancelled"


# Monotonic: nothing re-enters DRAFT
ALLOWED_TRANSITIONS: dict[PurchaseStatus, frozenset[PurchaseStatus]] = {
    PurchaseStatus.DRAFT: frozenset({PurchaseStatus.POSTED}),
    PurchaseStatus.POSTED: frozenset({PurchaseStatus.CANCELLED}),
    PurchaseStatus.CANCELLED: frozenset(),
}


class PurchaseItem(BaseModel):
    """A single received product line."""

    product_id: int
    quantity: int
    unit_cost: Decimal
    line_total: Decimal = ZERO

    @model_validator(mode="after")
    def compute_line(self) -> "PurchaseItem":
        self.line_total = money(self.quantity * self.unit_cost)
        return self


class Purchase(BaseModel):
    """A supplier purchase moving through draft -> posted -> cancelled."""

    id: int | None = None
    supplier_id: int | None = None
    invoice_no: str | None = None
    invoice_date: date | None = None
    status: PurchaseStatus = PurchaseStatus.DRAFT
    items: list[PurchaseItem] = Field(default_factory=list)
    sub_total: Decimal = ZERO
    discount: Decimal = ZERO
    tax: Decimal = ZERO
    grand_total: Decimal = ZERO
    note: str | None = None
    created_by: int | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_totals(self) -> "Purchase":
        """Compute sub_total and grand_total from items, discount and tax."""
        self.recompute_totals()
        return self

    def recompute_totals(self) -> None:
        self.sub_total = money(sum((i.line_total for i in self.items), ZERO))
        self.grand_total = money(self.sub_total - self.discount + self.tax)

    @property
    def reference(self) -> str:
        """Context note written on inventory log entries."""
        ref = f"purchase:{self.id}"
        if self.invoice_no:
            ref += f" #{self.invoice_no}"
        return ref

    def can_transition(self, target: PurchaseStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def require_status(self, expected: PurchaseStatus, message: str) -> None:
        if self.status != expected:
            raise InvalidPurchaseStateError(self.id or 0, self.status.value, message)

    def mark_posted(self) -> None:
        self._transition(PurchaseStatus.POSTED)

    def mark_cancelled(self, reason: str, at: datetime | None = None) -> None:
        self._transition(PurchaseStatus.CANCELLED)
        self.cancelled_at = at or datetime.now(UTC)
        self.cancel_reason = reason

    def _transition(self, target: PurchaseStatus) -> None:
        if not self.can_transition(target):
            raise InvalidPurchaseStateError(
                self.id or 0,
                self.status.value,
                f"Cannot move purchase from {self.status.value} to {target.value}",
            )
        self.status = target
        self.updated_at = datetime.now(UTC)
