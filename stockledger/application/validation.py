"""Boundary validation shared by the ledger use cases.

Quantities and amounts are checked once here and converted to their domain
types; nothing downstream re-coerces them.
"""

from collections.abc import Sequence
from decimal import Decimal

from stockledger.application.dto.requests import PurchaseItemRequest, SaleLineRequest
from stockledger.core.entities.purchase import PurchaseItem
from stockledger.core.exceptions import ValidationError
from stockledger.core.money import ZERO, money

HUNDRED = Decimal(100)


def require_non_negative(field: str, value: Decimal) -> Decimal:
    if not value.is_finite() or value < ZERO:
        raise ValidationError(field, "must be zero or greater", value)
    return value


def require_positive_quantity(field: str, value: int) -> int:
    if value <= 0:
        raise ValidationError(field, "must be greater than zero", value)
    return value


def require_discount_percent(field: str, value: Decimal) -> Decimal:
    if not value.is_finite() or value < ZERO or value > HUNDRED:
        raise ValidationError(field, "must be between 0 and 100", value)
    return value


def build_purchase_items(items: Sequence[PurchaseItemRequest]) -> list[PurchaseItem]:
    """Validate purchase lines and turn them into domain items."""
    if not items:
        raise ValidationError("items", "at least one item is required")
    built = []
    for index, item in enumerate(items):
        require_positive_quantity(f"items[{index}].quantity", item.quantity)
        require_non_negative(f"items[{index}].unit_cost", item.unit_cost)
        built.append(
            PurchaseItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
            )
        )
    return built


def validate_purchase_amounts(discount: Decimal, tax: Decimal) -> tuple[Decimal, Decimal]:
    return (
        money(require_non_negative("discount", discount)),
        money(require_non_negative("tax", tax)),
    )


def validate_sale_lines(lines: Sequence[SaleLineRequest]) -> list[tuple[int, int]]:
    """Validate sale lines. Returns (product_id, quantity) pairs in order."""
    if not lines:
        raise ValidationError("lines", "at least one line is required")
    return [
        (line.product_id, require_positive_quantity(f"lines[{index}].quantity", line.quantity))
        for index, line in enumerate(lines)
    ]
