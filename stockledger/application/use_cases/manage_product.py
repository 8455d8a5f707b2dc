"""Product use cases: register with opening stock, archive and restore."""

from dataclasses import dataclass

from stockledger.application.dto.requests import RegisterProductRequest
from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    ProductMutationResponse,
    ProductResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.application.validation import require_non_negative
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryLogEntry
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import (
    PermissionDeniedError,
    ProductDeletedError,
    ProductNotFoundError,
    ValidationError,
)
from stockledger.core.money import money
from stockledger.core.services import StockLedger

logger = get_logger(__name__)


@dataclass
class ProductMutationResult:
    product: Product
    log_entry: InventoryLogEntry | None = None


def product_mutation_response(result: ProductMutationResult) -> ProductMutationResponse:
    return ProductMutationResponse(
        product=ProductResponse.from_entity(result.product),
        log_entry=(
            InventoryLogEntryResponse.from_entity(result.log_entry)
            if result.log_entry
            else None
        ),
    )


class RegisterProductUseCase(LedgerUseCase):
    """Register a product. The opening stock is always logged as product.create."""

    async def execute(self, request: RegisterProductRequest, actor: Actor) -> ProductMutationResult:
        code = request.code.strip()
        name = request.name.strip()
        if not code:
            raise ValidationError("code", "must not be empty", request.code)
        if not name:
            raise ValidationError("name", "must not be empty", request.name)
        price = money(require_non_negative("price", request.price))
        if request.stock < 0:
            raise ValidationError("stock", "must be zero or greater", request.stock)

        async with self._unit_of_work() as uow:
            product = await uow.products.create(
                Product(
                    code=code,
                    name=name,
                    price=price,
                    stock=request.stock,
                    supplier_id=request.supplier_id,
                )
            )
            entry = await StockLedger(uow, actor).open(product)

        logger.info(
            "product_registered",
            product_id=product.id,
            code=product.code,
            opening_stock=product.stock,
        )
        return ProductMutationResult(product=product, log_entry=entry)

    def to_response(self, result: ProductMutationResult) -> ProductMutationResponse:
        return product_mutation_response(result)


class ArchiveProductUseCase(LedgerUseCase):
    """
    Soft-delete a product. Stock and log are untouched.

    The inventory log only records stock deltas, and every entry must satisfy
    after_qty = before_qty + delta with a non-zero delta. Archiving moves no
    stock, so it writes no entry. Archiving an already archived product is a
    conflict rather than a silent success, so a caller cannot mistake a stale
    view for a fresh archive.
    """

    async def execute(self, product_id: int, actor: Actor) -> ProductMutationResult:
        async with self._unit_of_work() as uow:
            product = await uow.products.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if not await uow.products.set_deleted(product_id, True):
                raise ProductDeletedError(product_id)
            product.is_deleted = True

        logger.info("product_archived", product_id=product_id, actor_id=actor.id)
        return ProductMutationResult(product=product)

    def to_response(self, result: ProductMutationResult) -> ProductMutationResponse:
        return product_mutation_response(result)


class RestoreProductUseCase(LedgerUseCase):
    """
    Bring an archived product back. Admin only; restoring an active product is a no-op.

    Like archiving, this changes no quantity and therefore writes no log entry.
    """

    async def execute(self, product_id: int, actor: Actor) -> ProductMutationResult:
        if not actor.is_admin:
            raise PermissionDeniedError("restore products")

        async with self._unit_of_work() as uow:
            product = await uow.products.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if await uow.products.set_deleted(product_id, False):
                logger.info("product_restored", product_id=product_id, actor_id=actor.id)
            product.is_deleted = False

        return ProductMutationResult(product=product)

    def to_response(self, result: ProductMutationResult) -> ProductMutationResponse:
        return product_mutation_response(result)
