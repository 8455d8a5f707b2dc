"""Adjust Stock Use Case: correct a product's stock to a counted quantity."""

from stockledger.application.dto.requests import AdjustStockRequest
from stockledger.application.dto.responses import ProductMutationResponse
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.use_cases.manage_product import (
    ProductMutationResult,
    product_mutation_response,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import ProductNotFoundError, ValidationError
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


class AdjustStockUseCase(LedgerUseCase):
    """Set stock to an absolute quantity; logs stock.adjust only when it changes."""

    async def execute(
        self, product_id: int, request: AdjustStockRequest, actor: Actor
    ) -> ProductMutationResult:
        if request.quantity < 0:
            raise ValidationError("quantity", "must be zero or greater", request.quantity)

        async with self._unit_of_work() as uow:
            entry = await StockLedger(uow, actor).adjust(
                product_id, request.quantity, note=request.note
            )
            product = await uow.products.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

        logger.info(
            "stock_adjusted",
            product_id=product_id,
            quantity=request.quantity,
            delta=entry.delta if entry else 0,
            actor_id=actor.id,
        )
        return ProductMutationResult(product=product, log_entry=entry)

    def to_response(self, result: ProductMutationResult) -> ProductMutationResponse:
        return product_mutation_response(result)
