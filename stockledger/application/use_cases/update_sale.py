"""Update Sale Use Case: restore every original line, then apply the new ones."""

from stockledger.application.dto.requests import UpdateSaleRequest
from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    SaleMutationResponse,
    SaleResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.use_cases.create_sale import (
    SaleMutationResult,
    price_lines,
    sale_note,
)
from stockledger.application.validation import require_discount_percent, validate_sale_lines
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction
from stockledger.core.exceptions import SaleNotFoundError
from stockledger.core.services import StockLedger, load_active_products

logger = get_logger(__name__)


class UpdateSaleUseCase(LedgerUseCase):
    """
    Replace the lines of a sale.

    Phase 1 puts back every original line (sale.update.restore), phase 2
    takes out every new line (sale.update.apply). Both phases share one
    write transaction, so the restored quantities are never visible to, or
    consumable by, another operation. A failing new line rolls back both.
    """

    async def execute(
        self, sale_id: int, request: UpdateSaleRequest, actor: Actor
    ) -> SaleMutationResult:
        pairs = validate_sale_lines(request.lines)
        discount = None
        if request.discount is not None:
            discount = require_discount_percent("discount", request.discount)

        logger.info(
            "update_sale_started",
            sale_id=sale_id,
            lines=len(pairs),
            actor_id=actor.id,
        )

        async with self._unit_of_work() as uow:
            sale = await uow.sales.get(sale_id)
            if sale is None:
                raise SaleNotFoundError(sale_id)

            ledger = StockLedger(uow, actor)
            note = sale_note(sale)

            # 1. Restore originals, archived products included
            for line in sale.lines:
                await ledger.restore(
                    line.product_id,
                    line.quantity,
                    action=InventoryAction.SALE_UPDATE_RESTORE,
                    sale_id=sale.id,
                    note=note,
                )

            # 2. Apply new lines at current prices
            products = await load_active_products(uow.products, [pid for pid, _ in pairs])
            new_lines = price_lines(pairs, products)
            for line in new_lines:
                await ledger.issue(
                    line.product_id,
                    line.quantity,
                    action=InventoryAction.SALE_UPDATE_APPLY,
                    sale_id=sale.id,
                    note=note,
                )

            if request.customer_id is not None:
                sale.customer_id = request.customer_id
            if request.sale_date is not None:
                sale.sale_date = request.sale_date
            if discount is not None:
                sale.discount = discount
            sale.lines = new_lines
            sale.updated_by = actor.id
            sale.recompute_totals()
            sale = await uow.sales.update(sale)

        logger.info(
            "sale_updated",
            sale_id=sale.id,
            sale_code=sale.sale_code,
            entries=len(ledger.entries),
        )
        return SaleMutationResult(sale=sale, log_entries=ledger.entries)

    def to_response(self, result: SaleMutationResult) -> SaleMutationResponse:
        """Convert result to API response."""
        return SaleMutationResponse(
            sale=SaleResponse.from_entity(result.sale),
            log_entries=[InventoryLogEntryResponse.from_entity(e) for e in result.log_entries],
        )
