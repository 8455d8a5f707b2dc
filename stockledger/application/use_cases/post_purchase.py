"""Post Purchase Use Case: draft -> posted, receiving stock with WAC recalculation."""

from dataclasses import dataclass, field

from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    PurchaseResponse,
    PurchaseTransitionResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryLogEntry
from stockledger.core.entities.purchase import Purchase, PurchaseStatus
from stockledger.core.exceptions import InvalidPurchaseStateError, PurchaseNotFoundError
from stockledger.core.services import (
    StockLedger,
    SupplierBindingEnforcer,
    load_active_products,
)

logger = get_logger(__name__)


@dataclass
class PurchaseTransitionResult:
    """Result of posting or cancelling a purchase."""

    purchase: Purchase
    log_entries: list[InventoryLogEntry] = field(default_factory=list)
    bound_product_ids: list[int] = field(default_factory=list)


class PostPurchaseUseCase(LedgerUseCase):
    """
    Post a draft purchase.

    Every item adds its quantity to stock, folds its unit cost into the
    product's weighted-average cost and writes one purchase.post entry.
    All item mutations, log entries and the status change commit together
    or not at all.
    """

    async def execute(self, purchase_id: int, actor: Actor) -> PurchaseTransitionResult:
        logger.info("post_purchase_started", purchase_id=purchase_id, actor_id=actor.id)

        async with self._unit_of_work() as uow:
            purchase = await uow.purchases.get(purchase_id)
            if purchase is None:
                raise PurchaseNotFoundError(purchase_id)
            purchase.require_status(PurchaseStatus.DRAFT, "Only draft purchases can be posted")

            # 1. Products must still exist and be active
            products = await load_active_products(
                uow.products, [item.product_id for item in purchase.items]
            )

            # 2. Binding may have changed since the draft was saved
            bound = await SupplierBindingEnforcer(uow.products).enforce(
                purchase.supplier_id, products.values()
            )

            # 3. Claim the transition before touching stock
            purchase.mark_posted()
            if not await uow.purchases.update_status(purchase, PurchaseStatus.DRAFT):
                raise InvalidPurchaseStateError(
                    purchase_id,
                    PurchaseStatus.DRAFT.value,
                    "Only draft purchases can be posted",
                )

            # 4. Receive each item in order
            ledger = StockLedger(uow, actor)
            for item in purchase.items:
                await ledger.receive(
                    item.product_id,
                    item.quantity,
                    item.unit_cost,
                    purchase_id=purchase.id,
                    note=purchase.reference,
                )

        logger.info(
            "purchase_posted",
            purchase_id=purchase.id,
            entries=len(ledger.entries),
            bound_products=len(bound),
        )
        return PurchaseTransitionResult(
            purchase=purchase,
            log_entries=ledger.entries,
            bound_product_ids=bound,
        )

    def to_response(self, result: PurchaseTransitionResult) -> PurchaseTransitionResponse:
        """Convert result to API response."""
        return PurchaseTransitionResponse(
            purchase=PurchaseResponse.from_entity(result.purchase),
            log_entries=[InventoryLogEntryResponse.from_entity(e) for e in result.log_entries],
            bound_product_ids=result.bound_product_ids,
        )
