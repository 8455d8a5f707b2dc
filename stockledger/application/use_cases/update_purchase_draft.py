"""Update Purchase Draft Use Case: replace header and items of a draft."""

from stockledger.application.dto.requests import UpdatePurchaseRequest
from stockledger.application.dto.responses import PurchaseResponse
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.use_cases.create_purchase_draft import PurchaseDraftResult
from stockledger.application.validation import build_purchase_items, validate_purchase_amounts
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.purchase import PurchaseStatus
from stockledger.core.exceptions import PurchaseNotFoundError
from stockledger.core.services import SupplierBindingEnforcer, load_active_products

logger = get_logger(__name__)


class UpdatePurchaseDraftUseCase(LedgerUseCase):
    """Edit a draft purchase. Totals are recomputed from the new items."""

    async def execute(
        self, purchase_id: int, request: UpdatePurchaseRequest, actor: Actor
    ) -> PurchaseDraftResult:
        items = build_purchase_items(request.items)
        discount, tax = validate_purchase_amounts(request.discount, request.tax)

        async with self._unit_of_work() as uow:
            purchase = await uow.purchases.get(purchase_id)
            if purchase is None:
                raise PurchaseNotFoundError(purchase_id)
            purchase.require_status(PurchaseStatus.DRAFT, "Only draft purchases can be edited")

            products = await load_active_products(
                uow.products, [item.product_id for item in items]
            )
            bound = await SupplierBindingEnforcer(uow.products).enforce(
                request.supplier_id, products.values()
            )

            purchase.supplier_id = request.supplier_id
            purchase.invoice_no = request.invoice_no
            purchase.invoice_date = request.invoice_date
            purchase.items = items
            purchase.discount = discount
            purchase.tax = tax
            purchase.note = request.note
            purchase.recompute_totals()
            purchase = await uow.purchases.update(purchase)

        logger.info(
            "purchase_draft_updated",
            purchase_id=purchase.id,
            items=len(items),
            actor_id=actor.id,
        )
        return PurchaseDraftResult(purchase=purchase, bound_product_ids=bound)

    def to_response(self, result: PurchaseDraftResult) -> PurchaseResponse:
        """Convert result to API response."""
        return PurchaseResponse.from_entity(result.purchase)
