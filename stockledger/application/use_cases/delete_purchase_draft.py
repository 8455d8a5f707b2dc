"""Delete Purchase Draft Use Case."""

from stockledger.application.dto.responses import DeleteResponse
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.purchase import PurchaseStatus
from stockledger.core.exceptions import PurchaseNotFoundError

logger = get_logger(__name__)


class DeletePurchaseDraftUseCase(LedgerUseCase):
    """Hard-delete a draft purchase. No stock or log effect."""

    async def execute(self, purchase_id: int, actor: Actor) -> int:
        async with self._unit_of_work() as uow:
            purchase = await uow.purchases.get(purchase_id)
            if purchase is None:
                raise PurchaseNotFoundError(purchase_id)
            purchase.require_status(PurchaseStatus.DRAFT, "Only draft purchases can be deleted")
            await uow.purchases.delete(purchase_id)

        logger.info("purchase_draft_deleted", purchase_id=purchase_id, actor_id=actor.id)
        return purchase_id

    def to_response(self, purchase_id: int) -> DeleteResponse:
        return DeleteResponse(id=purchase_id)
