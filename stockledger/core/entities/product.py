"""Product ledger state."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.money import ZERO


class Product(BaseModel):
    """Stock quantity, cost basis and supplier binding of a product."""

    id: int | None = None
    code: str
    name: str
    price: Decimal = ZERO  # current selling price
    stock: int = 0
    avg_cost: Decimal = ZERO  # weighted average cost, 4 dp
    last_cost: Decimal = ZERO
    supplier_id: int | None = None
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def stock_value(self) -> Decimal:
        """Inventory value = stock * avg_cost."""
        return self.stock * self.avg_cost

    @property
    def display_name(self) -> str:
        return self.name or self.code
