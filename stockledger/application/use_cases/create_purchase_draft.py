"""Create Purchase Draft Use Case: store a draft and bind suppliers eagerly."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import CreatePurchaseRequest
from stockledger.application.dto.responses import PurchaseResponse
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.validation import build_purchase_items, validate_purchase_amounts
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.purchase import Purchase
from stockledger.core.services import SupplierBindingEnforcer, load_active_products

logger = get_logger(__name__)


@dataclass
class PurchaseDraftResult:
    """Result of creating or updating a draft."""

    purchase: Purchase
    bound_product_ids: list[int] = field(default_factory=list)


class CreatePurchaseDraftUseCase(LedgerUseCase):
    """Create a purchase in draft status. No stock effect."""

    async def execute(self, request: CreatePurchaseRequest, actor: Actor) -> PurchaseDraftResult:
        items = build_purchase_items(request.items)
        discount, tax = validate_purchase_amounts(request.discount, request.tax)

        logger.info(
            "create_purchase_draft_started",
            supplier_id=request.supplier_id,
            items=len(items),
            actor_id=actor.id,
        )

        async with self._unit_of_work() as uow:
            products = await load_active_products(
                uow.products, [item.product_id for item in items]
            )
            bound = await SupplierBindingEnforcer(uow.products).enforce(
                request.supplier_id, products.values()
            )

            purchase = Purchase(
                supplier_id=request.supplier_id,
                invoice_no=request.invoice_no,
                invoice_date=request.invoice_date,
                items=items,
                discount=discount,
                tax=tax,
                note=request.note,
                created_by=actor.id,
            )
            purchase = await uow.purchases.create(purchase)

        logger.info(
            "purchase_draft_created",
            purchase_id=purchase.id,
            grand_total=str(purchase.grand_total),
        )
        return PurchaseDraftResult(purchase=purchase, bound_product_ids=bound)

    def to_response(self, result: PurchaseDraftResult) -> PurchaseResponse:
        """Convert result to API response."""
        return PurchaseResponse.from_entity(result.purchase)
