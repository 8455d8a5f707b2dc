"""Weighted-average cost engine."""

from decimal import Decimal

from stockledger.core.money import COST_PLACES, quantize


def weighted_average_cost(
    prev_qty: int,
    prev_avg_cost: Decimal,
    incoming_qty: int,
    incoming_unit_cost: Decimal,
    places: int = COST_PLACES,
) -> Decimal:
    """
    Recompute a running cost per unit after receiving stock.

    new_avg = (prev_qty * prev_avg + incoming_qty * incoming_cost) / (prev_qty + incoming_qty)

    Falls back to the incoming unit cost when the combined quantity is zero.
    The result is rounded half-up to `places` decimals.
    """
    denominator = prev_qty + incoming_qty
    if denominator > 0:
        total_value = prev_qty * prev_avg_cost + incoming_qty * incoming_unit_cost
        return quantize(total_value / denominator, places)
    return quantize(incoming_unit_cost, places)
