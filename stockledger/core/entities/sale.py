"""Sale domain entities."""

from datetime import UTC, date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from stockledger.core.money import ZERO, money


def utc_today() -> date:
    """Calendar day used for sale dates and sale codes."""
    return datetime.now(UTC).date()


class SaleLine(BaseModel):
    """A sold product line. unit_price is frozen when the line is applied."""

    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal = ZERO

    @model_validator(mode="after")
    def compute_line(self) -> "SaleLine":
        self.total_price = money(self.unit_price * self.quantity)
        return self


class Sale(BaseModel):
    """A customer sale whose lines have already been taken out of stock."""

    id: int | None = None
    sale_code: str | None = None
    customer_id: int | None = None
    sale_date: date = Field(default_factory=utc_today)
    lines: list[SaleLine] = Field(default_factory=list)
    total_amount: Decimal = ZERO
    discount: Decimal = ZERO  # percent
    discounted_amount: Decimal = ZERO
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_totals(self) -> "Sale":
        """Compute total_amount and discounted_amount from lines and discount."""
        self.recompute_totals()
        return self

    def recompute_totals(self) -> None:
        self.total_amount = money(sum((line.total_price for line in self.lines), ZERO))
        self.discounted_amount = money(
            self.total_amount * (Decimal(100) - self.discount) / Decimal(100)
        )
