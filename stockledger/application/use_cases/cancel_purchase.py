"""Cancel Purchase Use Case: posted -> cancelled, reversing received stock."""

from collections import defaultdict

from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    PurchaseResponse,
    PurchaseTransitionResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.use_cases.post_purchase import PurchaseTransitionResult
from stockledger.config import Settings, get_logger, get_settings
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction
from stockledger.core.entities.purchase import PurchaseStatus
from stockledger.core.exceptions import (
    InsufficientStockToReverseError,
    InvalidPurchaseStateError,
    PermissionDeniedError,
    ProductNotFoundError,
    PurchaseNotFoundError,
)
from stockledger.core.interfaces.unit_of_work import UnitOfWorkFactory
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


class CancelPurchaseUseCase(LedgerUseCase):
    """
    Cancel a posted purchase. Admin only.

    Verify first, then apply: every product must still hold at least the
    total quantity this purchase put on it, otherwise nothing is mutated.
    Average cost is left as it was computed at posting.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(uow_factory)
        self._settings = settings

    async def execute(
        self, purchase_id: int, actor: Actor, reason: str | None = None
    ) -> PurchaseTransitionResult:
        if not actor.is_admin:
            raise PermissionDeniedError("cancel purchases")

        settings = self._settings or get_settings()
        reason = (reason or "").strip() or settings.ledger.default_cancel_reason

        logger.info("cancel_purchase_started", purchase_id=purchase_id, actor_id=actor.id)

        async with self._unit_of_work() as uow:
            purchase = await uow.purchases.get(purchase_id)
            if purchase is None:
                raise PurchaseNotFoundError(purchase_id)
            purchase.require_status(
                PurchaseStatus.POSTED, "Only posted purchases can be cancelled"
            )

            # 1. Verify pass: repeated lines for one product are summed
            required: dict[int, int] = defaultdict(int)
            for item in purchase.items:
                required[item.product_id] += item.quantity
            for product_id, quantity in required.items():
                product = await uow.products.get(product_id)
                if product is None:
                    raise ProductNotFoundError(product_id)
                if product.stock < quantity:
                    logger.warning(
                        "cancel_purchase_blocked",
                        purchase_id=purchase_id,
                        product_id=product_id,
                        available=product.stock,
                        required=quantity,
                    )
                    raise InsufficientStockToReverseError(
                        product_id=product_id,
                        product_name=product.display_name,
                        available=product.stock,
                        required=quantity,
                    )

            # 2. Claim the transition
            purchase.mark_cancelled(reason)
            if not await uow.purchases.update_status(purchase, PurchaseStatus.POSTED):
                raise InvalidPurchaseStateError(
                    purchase_id,
                    PurchaseStatus.POSTED.value,
                    "Only posted purchases can be cancelled",
                )

            # 3. Apply pass
            ledger = StockLedger(uow, actor)
            for item in purchase.items:
                await ledger.issue(
                    item.product_id,
                    item.quantity,
                    action=InventoryAction.PURCHASE_CANCEL,
                    purchase_id=purchase.id,
                    note=purchase.reference,
                )

        logger.info(
            "purchase_cancelled",
            purchase_id=purchase.id,
            entries=len(ledger.entries),
            reason=reason,
        )
        return PurchaseTransitionResult(purchase=purchase, log_entries=ledger.entries)

    def to_response(self, result: PurchaseTransitionResult) -> PurchaseTransitionResponse:
        """Convert result to API response."""
        return PurchaseTransitionResponse(
            purchase=PurchaseResponse.from_entity(result.purchase),
            log_entries=[InventoryLogEntryResponse.from_entity(e) for e in result.log_entries],
        )
