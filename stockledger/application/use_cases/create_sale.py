"""Create Sale Use Case: allocate a sale code and take the lines out of stock."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import CreateSaleRequest
from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    SaleMutationResponse,
    SaleResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.validation import require_discount_percent, validate_sale_lines
from stockledger.config import Settings, get_logger, get_settings
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction, InventoryLogEntry
from stockledger.core.entities.product import Product
from stockledger.core.entities.sale import Sale, SaleLine, utc_today
from stockledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from stockledger.core.services import SaleCodeAllocator, StockLedger, load_active_products

logger = get_logger(__name__)


@dataclass
class SaleMutationResult:
    """Result of creating or updating a sale."""

    sale: Sale
    log_entries: list[InventoryLogEntry] = field(default_factory=list)


def price_lines(pairs: list[tuple[int, int]], products: dict[int, Product]) -> list[SaleLine]:
    """Freeze each product's current price onto its line."""
    return [
        SaleLine(product_id=product_id, quantity=quantity, unit_price=products[product_id].price)
        for product_id, quantity in pairs
    ]


def sale_note(sale: Sale) -> str:
    return f"sale:{sale.sale_code}"


class CreateSaleUseCase(LedgerUseCase):
    """
    Create a sale.

    Each line is taken out of stock with a single conditional write; a line
    that does not fit fails the whole sale with InsufficientStockError and
    nothing (sale, sequence number, stock, log) is kept.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(uow_factory)
        self._settings = settings

    async def execute(self, request: CreateSaleRequest, actor: Actor) -> SaleMutationResult:
        pairs = validate_sale_lines(request.lines)
        discount = require_discount_percent("discount", request.discount)
        ledger_settings = (self._settings or get_settings()).ledger

        logger.info(
            "create_sale_started",
            customer_id=request.customer_id,
            lines=len(pairs),
            actor_id=actor.id,
        )

        today = utc_today()
        async with self._unit_of_work() as uow:
            products = await load_active_products(uow.products, [pid for pid, _ in pairs])

            sale = Sale(
                customer_id=request.customer_id,
                sale_date=request.sale_date or today,
                lines=price_lines(pairs, products),
                discount=discount,
                created_by=actor.id,
                updated_by=actor.id,
            )

            allocator = SaleCodeAllocator(
                uow.sales,
                prefix=ledger_settings.sale_code_prefix,
                digits=ledger_settings.sale_code_digits,
                max_retries=ledger_settings.sale_code_max_retries,
            )
            sale = await allocator.create(sale, day=today)

            ledger = StockLedger(uow, actor)
            for line in sale.lines:
                await ledger.issue(
                    line.product_id,
                    line.quantity,
                    action=InventoryAction.SALE_CREATE,
                    sale_id=sale.id,
                    note=sale_note(sale),
                )

        logger.info(
            "sale_created",
            sale_id=sale.id,
            sale_code=sale.sale_code,
            total=str(sale.discounted_amount),
        )
        return SaleMutationResult(sale=sale, log_entries=ledger.entries)

    def to_response(self, result: SaleMutationResult) -> SaleMutationResponse:
        """Convert result to API response."""
        return SaleMutationResponse(
            sale=SaleResponse.from_entity(result.sale),
            log_entries=[InventoryLogEntryResponse.from_entity(e) for e in result.log_entries],
        )
