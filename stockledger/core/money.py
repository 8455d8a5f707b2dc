"""Decimal helpers for money and unit costs."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PLACES = 2
COST_PLACES = 4

ZERO = Decimal("0")


def quantize(value: Decimal | int, places: int) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def money(value: Decimal | int) -> Decimal:
    return quantize(value, MONEY_PLACES)


def cost(value: Decimal | int) -> Decimal:
    return quantize(value, COST_PLACES)
