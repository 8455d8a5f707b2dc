"""Read-only queries over products, purchases, sales and the inventory log."""

from datetime import datetime

from stockledger.application.dto.responses import (
    InventoryLogEntryResponse,
    InventoryLogListResponse,
    ProductListResponse,
    ProductResponse,
    PurchaseListResponse,
    PurchaseResponse,
    SaleListResponse,
    SaleResponse,
)
from stockledger.application.use_cases.base import LedgerUseCase
from stockledger.config import Settings, get_settings
from stockledger.core.entities.inventory_log import InventoryLogFilter
from stockledger.core.entities.purchase import PurchaseStatus
from stockledger.core.exceptions import (
    ProductNotFoundError,
    PurchaseNotFoundError,
    SaleNotFoundError,
    ValidationError,
)
from stockledger.core.interfaces.unit_of_work import UnitOfWorkFactory


def _check_page(limit: int, offset: int, max_limit: int) -> None:
    if limit < 1 or limit > max_limit:
        raise ValidationError("limit", f"must be between 1 and {max_limit}", limit)
    if offset < 0:
        raise ValidationError("offset", "must be zero or greater", offset)


class LedgerQueries(LedgerUseCase):
    """Each query runs in its own read transaction for a consistent snapshot."""

    readonly = True

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory | None = None,
        settings: Settings | None = None,
    ):
        super().__init__(uow_factory)
        self._settings = settings

    @property
    def max_page_size(self) -> int:
        return (self._settings or get_settings()).ledger.max_log_page_size

    # --- Products ---

    async def get_product(self, product_id: int) -> ProductResponse:
        async with self._unit_of_work() as uow:
            product = await uow.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductResponse.from_entity(product)

    async def list_products(
        self, limit: int = 100, offset: int = 0, include_deleted: bool = False
    ) -> ProductListResponse:
        _check_page(limit, offset, self.max_page_size)
        async with self._unit_of_work() as uow:
            products = await uow.products.list_products(limit, offset, include_deleted)
            total = await uow.products.count_products(include_deleted)
        return ProductListResponse(
            products=[ProductResponse.from_entity(p) for p in products],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(products) < total,
        )

    # --- Purchases ---

    async def get_purchase(self, purchase_id: int) -> PurchaseResponse:
        async with self._unit_of_work() as uow:
            purchase = await uow.purchases.get(purchase_id)
        if purchase is None:
            raise PurchaseNotFoundError(purchase_id)
        return PurchaseResponse.from_entity(purchase)

    async def list_purchases(
        self,
        supplier_id: int | None = None,
        status: PurchaseStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> PurchaseListResponse:
        _check_page(limit, offset, self.max_page_size)
        async with self._unit_of_work() as uow:
            purchases = await uow.purchases.list_purchases(
                supplier_id, status, date_from, date_to, limit, offset
            )
            total = await uow.purchases.count_purchases(
                supplier_id, status, date_from, date_to
            )
        return PurchaseListResponse(
            purchases=[PurchaseResponse.from_entity(p) for p in purchases],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(purchases) < total,
        )

    # --- Sales ---

    async def get_sale(self, sale_id: int) -> SaleResponse:
        async with self._unit_of_work() as uow:
            sale = await uow.sales.get(sale_id)
        if sale is None:
            raise SaleNotFoundError(sale_id)
        return SaleResponse.from_entity(sale)

    async def list_sales(self, limit: int = 50, offset: int = 0) -> SaleListResponse:
        _check_page(limit, offset, self.max_page_size)
        async with self._unit_of_work() as uow:
            sales = await uow.sales.list_sales(limit, offset)
            total = await uow.sales.count_sales()
        return SaleListResponse(
            sales=[SaleResponse.from_entity(s) for s in sales],
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(sales) < total,
        )

    # --- Inventory log ---

    async def query_inventory_log(self, log_filter: InventoryLogFilter) -> InventoryLogListResponse:
        _check_page(log_filter.limit, log_filter.offset, self.max_page_size)
        if (
            log_filter.date_from is not None
            and log_filter.date_to is not None
            and log_filter.date_from > log_filter.date_to
        ):
            raise ValidationError("date_from", "must not be after date_to", log_filter.date_from)

        async with self._unit_of_work() as uow:
            entries = await uow.inventory_log.query(log_filter)
            total = await uow.inventory_log.count(log_filter)
        return InventoryLogListResponse(
            entries=[InventoryLogEntryResponse.from_entity(e) for e in entries],
            total=total,
            limit=log_filter.limit,
            offset=log_filter.offset,
            has_more=log_filter.offset + len(entries) < total,
        )
