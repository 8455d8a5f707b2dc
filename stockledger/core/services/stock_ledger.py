"""
Stock ledger: the only code path that changes a product's stock.

Each mutation is a single write against the product row followed by exactly
one inventory log entry whose before/after pair is derived from the quantity
the write left behind, so entries stay consistent line by line even when one
operation touches the same product several times.
"""

from collections.abc import Sequence
from decimal import Decimal

from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction, InventoryLogEntry
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import (
    InsufficientStockError,
    ProductDeletedError,
    ProductNotFoundError,
)
from stockledger.core.interfaces.product_store import IProductStore
from stockledger.core.interfaces.unit_of_work import IUnitOfWork
from stockledger.core.money import cost
from stockledger.core.services.costing import weighted_average_cost

logger = get_logger(__name__)


async def load_active_products(
    products: IProductStore, product_ids: Sequence[int]
) -> dict[int, Product]:
    """Load every referenced product, failing on the first missing or archived one."""
    loaded: dict[int, Product] = {}
    for index, product_id in enumerate(product_ids):
        if product_id in loaded:
            continue
        product = await products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id, index)
        if product.is_deleted:
            raise ProductDeletedError(product_id, index)
        loaded[product_id] = product
    return loaded


class StockLedger:
    """Applies stock deltas inside a unit of work on behalf of one actor."""

    def __init__(self, uow: IUnitOfWork, actor: Actor):
        self._uow = uow
        self._actor = actor
        self.entries: list[InventoryLogEntry] = []

    async def receive(
        self,
        product_id: int,
        quantity: int,
        unit_cost: Decimal,
        *,
        purchase_id: int | None = None,
        note: str | None = None,
    ) -> InventoryLogEntry:
        """Add received stock and fold its cost into the weighted average."""
        product = await self._require(product_id)
        new_avg = weighted_average_cost(product.stock, product.avg_cost, quantity, unit_cost)
        after = await self._uow.products.apply_receipt(
            product_id, quantity, new_avg, cost(unit_cost)
        )
        return await self._record(
            product_id,
            InventoryAction.PURCHASE_POST,
            quantity,
            after,
            purchase_id=purchase_id,
            note=note,
        )

    async def issue(
        self,
        product_id: int,
        quantity: int,
        *,
        action: InventoryAction,
        sale_id: int | None = None,
        purchase_id: int | None = None,
        note: str | None = None,
    ) -> InventoryLogEntry:
        """Take stock out with a conditional write; fails if not enough on hand."""
        after = await self._uow.products.decrement_if_available(product_id, quantity)
        if after is None:
            product = await self._uow.products.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            raise InsufficientStockError(
                product_id=product_id,
                product_name=product.display_name,
                requested=quantity,
                available=product.stock,
            )
        return await self._record(
            product_id,
            action,
            -quantity,
            after,
            sale_id=sale_id,
            purchase_id=purchase_id,
            note=note,
        )

    async def restore(
        self,
        product_id: int,
        quantity: int,
        *,
        action: InventoryAction,
        sale_id: int | None = None,
        note: str | None = None,
    ) -> InventoryLogEntry:
        """Put previously issued stock back. Archived products are restored too."""
        if await self._uow.products.get(product_id) is None:
            raise ProductNotFoundError(product_id)
        after = await self._uow.products.increment(product_id, quantity)
        return await self._record(
            product_id, action, quantity, after, sale_id=sale_id, note=note
        )

    async def adjust(
        self, product_id: int, new_quantity: int, *, note: str | None = None
    ) -> InventoryLogEntry | None:
        """Set stock to a counted quantity. Nothing is logged when it is unchanged."""
        product = await self._require(product_id)
        delta = new_quantity - product.stock
        if delta == 0:
            return None
        after = await self._uow.products.set_stock(product_id, new_quantity)
        return await self._record(
            product_id, InventoryAction.STOCK_ADJUST, delta, after, note=note
        )

    async def open(self, product: Product, *, note: str | None = None) -> InventoryLogEntry:
        """Record the opening stock of a newly registered product."""
        return await self._record(
            product.id,  # type: ignore[arg-type]
            InventoryAction.PRODUCT_CREATE,
            product.stock,
            product.stock,
            note=note,
        )

    async def _require(self, product_id: int) -> Product:
        product = await self._uow.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.is_deleted:
            raise ProductDeletedError(product_id)
        return product

    async def _record(
        self,
        product_id: int,
        action: InventoryAction,
        delta: int,
        after_qty: int,
        *,
        sale_id: int | None = None,
        purchase_id: int | None = None,
        note: str | None = None,
    ) -> InventoryLogEntry:
        entry = InventoryLogEntry(
            product_id=product_id,
            action=action,
            delta=delta,
            before_qty=after_qty - delta,
            after_qty=after_qty,
            actor_id=self._actor.id,
            sale_id=sale_id,
            purchase_id=purchase_id,
            note=note,
        )
        entry = await self._uow.inventory_log.append(entry)
        self.entries.append(entry)
        logger.debug(
            "stock_moved",
            product_id=product_id,
            action=action.value,
            delta=delta,
            after_qty=after_qty,
        )
        return entry
