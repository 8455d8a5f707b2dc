"""Delete Sale Use Case: put the sold stock back and remove the sale."""

from dataclasses import dataclass, field

from stockledger.application.dto.responses import DeleteSaleResponse, InventoryLogEntryResponse
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.use_cases.create_sale import sale_note
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction, InventoryLogEntry
from stockledger.core.entities.sale import Sale
from stockledger.core.exceptions import SaleNotFoundError
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class DeleteSaleResult:
    sale: Sale
    log_entries: list[InventoryLogEntry] = field(default_factory=list)


class DeleteSaleUseCase(LedgerUseCase):
    """Delete a sale. Log entries keep pointing at the deleted sale's ID."""

    async def execute(self, sale_id: int, actor: Actor) -> DeleteSaleResult:
        async with self._unit_of_work() as uow:
            sale = await uow.sales.get(sale_id)
            if sale is None:
                raise SaleNotFoundError(sale_id)

            ledger = StockLedger(uow, actor)
            for line in sale.lines:
                await ledger.restore(
                    line.product_id,
                    line.quantity,
                    action=InventoryAction.SALE_DELETE_RESTORE,
                    sale_id=sale.id,
                    note=sale_note(sale),
                )
            await uow.sales.delete(sale_id)

        logger.info(
            "sale_deleted",
            sale_id=sale_id,
            sale_code=sale.sale_code,
            actor_id=actor.id,
        )
        return DeleteSaleResult(sale=sale, log_entries=ledger.entries)

    def to_response(self, result: DeleteSaleResult) -> DeleteSaleResponse:
        """Convert result to API response."""
        return DeleteSaleResponse(
            sale_id=result.sale.id,  # type: ignore[arg-type]
            sale_code=result.sale.sale_code or "",
            log_entries=[InventoryLogEntryResponse.from_entity(e) for e in result.log_entries],
        )
