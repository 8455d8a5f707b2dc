"""Tests for sale create/update/delete use cases."""

import asyncio
import re
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from stockledger.application.dto.requests import (
    CreateSaleRequest,
    SaleLineRequest,
    UpdateSaleRequest,
)
from stockledger.application.use_cases import (
    ArchiveProductUseCase,
    CreateSaleUseCase,
    DeleteSaleUseCase,
    UpdateSaleUseCase,
)
from stockledger.config import get_settings
from stockledger.core.entities.inventory_log import InventoryAction
from stockledger.core.exceptions import (
    InsufficientStockError,
    ProductDeletedError,
    ProductNotFoundError,
    SaleNotFoundError,
    ValidationError,
)
from stockledger.infrastructure.storage.sqlite import SQLiteUnitOfWork


def _sale_request(*lines: tuple[int, int], **kwargs) -> CreateSaleRequest:
    return CreateSaleRequest(
        lines=[SaleLineRequest(product_id=pid, quantity=qty) for pid, qty in lines],
        **kwargs,
    )


def _update_request(*lines: tuple[int, int], **kwargs) -> UpdateSaleRequest:
    return UpdateSaleRequest(
        lines=[SaleLineRequest(product_id=pid, quantity=qty) for pid, qty in lines],
        **kwargs,
    )


class TestCreateSale:
    async def test_create_takes_stock_and_logs(self, make_product, fetch_product, fetch_log, staff):
        product = await make_product(stock=10, price="7.50")

        result = await CreateSaleUseCase().execute(
            _sale_request((product.id, 3), customer_id=4, discount=Decimal("10")), staff
        )

        sale = result.sale
        assert re.fullmatch(r"INV-\d{8}-0001", sale.sale_code)
        assert sale.lines[0].unit_price == Decimal("7.50")
        assert sale.total_amount == Decimal("22.50")
        assert sale.discounted_amount == Decimal("20.25")
        assert sale.created_by == staff.id
        assert (await fetch_product(product.id)).stock == 7

        entries = await fetch_log(action=InventoryAction.SALE_CREATE)
        assert [(e.delta, e.before_qty, e.after_qty) for e in entries] == [(-3, 10, 7)]
        assert entries[0].sale_id == sale.id
        assert entries[0].note == f"sale:{sale.sale_code}"
        assert [e.id for e in result.log_entries] == [e.id for e in entries]

    async def test_code_uses_utc_day_and_sequence(self, make_product, staff):
        product = await make_product(stock=10)
        use_case = CreateSaleUseCase()

        first = await use_case.execute(_sale_request((product.id, 1)), staff)
        second = await use_case.execute(_sale_request((product.id, 1)), staff)

        today = datetime.now(UTC).strftime("%Y%m%d")
        assert first.sale.sale_code == f"INV-{today}-0001"
        assert second.sale.sale_code == f"INV-{today}-0002"

    async def test_sale_date_and_code_share_the_utc_day(self, make_product, staff, monkeypatch):
        product = await make_product(stock=1)
        monkeypatch.setattr(
            "stockledger.application.use_cases.create_sale.utc_today", lambda: date(2024, 1, 14)
        )

        result = await CreateSaleUseCase().execute(_sale_request((product.id, 1)), staff)

        assert result.sale.sale_date == date(2024, 1, 14)
        assert result.sale.sale_code == "INV-20240114-0001"

    async def test_explicit_sale_date_kept(self, make_product, staff):
        product = await make_product(stock=1)
        result = await CreateSaleUseCase().execute(
            _sale_request((product.id, 1), sale_date=date(2023, 12, 31)), staff
        )
        assert result.sale.sale_date == date(2023, 12, 31)
        assert result.sale.sale_code.startswith(f"INV-{datetime.now(UTC):%Y%m%d}-")

    async def test_prefix_from_settings(self, make_product, staff, monkeypatch):
        product = await make_product(stock=1)
        settings = get_settings()
        monkeypatch.setattr(settings.ledger, "sale_code_prefix", "POS")

        result = await CreateSaleUseCase(settings=settings).execute(
            _sale_request((product.id, 1)), staff
        )
        assert result.sale.sale_code.startswith("POS-")

    async def test_insufficient_stock(self, make_product, fetch_product, fetch_log, staff):
        """Requesting 5 against 3 on hand changes nothing."""
        product = await make_product(stock=3)

        with pytest.raises(InsufficientStockError) as exc_info:
            await CreateSaleUseCase().execute(_sale_request((product.id, 5)), staff)

        assert exc_info.value.details["available"] == 3
        assert (await fetch_product(product.id)).stock == 3
        assert await fetch_log(action=InventoryAction.SALE_CREATE) == []

    async def test_failed_line_rolls_back_whole_sale(self, make_product, fetch_product, staff):
        a = await make_product("A", stock=10)
        b = await make_product("B", stock=1)

        with pytest.raises(InsufficientStockError):
            await CreateSaleUseCase().execute(_sale_request((a.id, 4), (b.id, 2)), staff)

        assert (await fetch_product(a.id)).stock == 10
        async with SQLiteUnitOfWork(readonly=True) as uow:
            assert await uow.sales.count_sales() == 0

        # The sequence number was given back
        result = await CreateSaleUseCase().execute(_sale_request((a.id, 1)), staff)
        assert result.sale.sale_code.endswith("-0001")

    async def test_repeated_product_lines(self, make_product, fetch_product, staff):
        product = await make_product(stock=5)

        result = await CreateSaleUseCase().execute(
            _sale_request((product.id, 2), (product.id, 3)), staff
        )

        assert [(e.before_qty, e.after_qty) for e in result.log_entries] == [(5, 3), (3, 0)]
        assert (await fetch_product(product.id)).stock == 0

    async def test_archived_product(self, make_product, staff):
        product = await make_product(stock=5)
        await ArchiveProductUseCase().execute(product.id, staff)
        with pytest.raises(ProductDeletedError):
            await CreateSaleUseCase().execute(_sale_request((product.id, 1)), staff)

    async def test_unknown_product(self, ledger_db, staff):
        with pytest.raises(ProductNotFoundError):
            await CreateSaleUseCase().execute(_sale_request((404, 1)), staff)

    @pytest.mark.parametrize("discount", ["-1", "100.01"])
    async def test_discount_out_of_range(self, make_product, staff, discount):
        product = await make_product(stock=5)
        with pytest.raises(ValidationError):
            await CreateSaleUseCase().execute(
                _sale_request((product.id, 1), discount=Decimal(discount)), staff
            )

    async def test_empty_and_zero_lines(self, make_product, staff):
        product = await make_product(stock=5)
        with pytest.raises(ValidationError):
            await CreateSaleUseCase().execute(_sale_request(), staff)
        with pytest.raises(ValidationError):
            await CreateSaleUseCase().execute(_sale_request((product.id, 0)), staff)

    async def test_concurrent_sales_never_oversell(self, make_product, fetch_product, fetch_log, staff):
        product = await make_product(stock=10)
        use_case = CreateSaleUseCase()

        results = await asyncio.gather(
            *(use_case.execute(_sale_request((product.id, 3)), staff) for _ in range(6)),
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(succeeded) == 3
        assert all(isinstance(e, InsufficientStockError) for e in failed)
        assert (await fetch_product(product.id)).stock == 1
        assert len({r.sale.sale_code for r in succeeded}) == 3

        entries = await fetch_log(product_id=product.id)
        for earlier, later in zip(entries, entries[1:]):
            assert later.before_qty == earlier.after_qty


class TestUpdateSale:
    async def test_restore_then_apply(self, make_product, fetch_product, fetch_log, staff):
        """A sale of 2 updated to 5 logs +2 then -5."""
        product = await make_product(stock=10)
        created = await CreateSaleUseCase().execute(_sale_request((product.id, 2)), staff)
        assert (await fetch_product(product.id)).stock == 8

        result = await UpdateSaleUseCase().execute(
            created.sale.id, _update_request((product.id, 5)), staff
        )

        assert [(e.action, e.delta, e.before_qty, e.after_qty) for e in result.log_entries] == [
            (InventoryAction.SALE_UPDATE_RESTORE, 2, 8, 10),
            (InventoryAction.SALE_UPDATE_APPLY, -5, 10, 5),
        ]
        assert (await fetch_product(product.id)).stock == 5
        assert result.sale.lines[0].quantity == 5
        assert result.sale.total_amount == Decimal("50.00")
        assert result.sale.sale_code == created.sale.sale_code

    async def test_restored_quantity_can_be_resold(self, make_product, fetch_product, staff):
        product = await make_product(stock=4)
        created = await CreateSaleUseCase().execute(_sale_request((product.id, 4)), staff)

        await UpdateSaleUseCase().execute(created.sale.id, _update_request((product.id, 3)), staff)

        assert (await fetch_product(product.id)).stock == 1

    async def test_failing_new_line_rolls_back_both_phases(
        self, make_product, fetch_product, fetch_log, staff
    ):
        a = await make_product("A", stock=10)
        b = await make_product("B", stock=1)
        created = await CreateSaleUseCase().execute(_sale_request((a.id, 2)), staff)

        with pytest.raises(InsufficientStockError):
            await UpdateSaleUseCase().execute(
                created.sale.id, _update_request((a.id, 1), (b.id, 5)), staff
            )

        assert (await fetch_product(a.id)).stock == 8
        assert await fetch_log(action=InventoryAction.SALE_UPDATE_RESTORE) == []
        async with SQLiteUnitOfWork(readonly=True) as uow:
            sale = await uow.sales.get(created.sale.id)
        assert [(line.product_id, line.quantity) for line in sale.lines] == [(a.id, 2)]

    async def test_header_fields_only_when_given(self, make_product, staff, admin):
        product = await make_product(stock=10)
        created = await CreateSaleUseCase().execute(
            _sale_request((product.id, 1), customer_id=3, discount=Decimal("5")), staff
        )

        result = await UpdateSaleUseCase().execute(
            created.sale.id, _update_request((product.id, 2)), admin
        )

        assert result.sale.customer_id == 3
        assert result.sale.discount == Decimal("5")
        assert result.sale.updated_by == admin.id
        assert result.sale.created_by == staff.id

    async def test_price_refrozen_at_current_price(self, make_product, staff):
        product = await make_product(stock=10, price="2.00")
        created = await CreateSaleUseCase().execute(_sale_request((product.id, 1)), staff)
        async with SQLiteUnitOfWork() as uow:
            await uow.connection.execute(
                "UPDATE products SET price = '3.00' WHERE id = ?", (product.id,)
            )

        result = await UpdateSaleUseCase().execute(
            created.sale.id, _update_request((product.id, 1)), staff
        )
        assert result.sale.lines[0].unit_price == Decimal("3.00")

    async def test_original_line_on_archived_product_is_restored(
        self, make_product, fetch_product, staff
    ):
        old = await make_product("OLD", stock=5)
        new = await make_product("NEW", stock=5)
        created = await CreateSaleUseCase().execute(_sale_request((old.id, 2)), staff)
        await ArchiveProductUseCase().execute(old.id, staff)

        await UpdateSaleUseCase().execute(created.sale.id, _update_request((new.id, 1)), staff)

        assert (await fetch_product(old.id)).stock == 5
        assert (await fetch_product(new.id)).stock == 4

    async def test_missing_sale(self, make_product, staff):
        product = await make_product(stock=1)
        with pytest.raises(SaleNotFoundError):
            await UpdateSaleUseCase().execute(404, _update_request((product.id, 1)), staff)


class TestDeleteSale:
    async def test_delete_restores_stock(self, make_product, fetch_product, fetch_log, admin, staff):
        a = await make_product("A", stock=10)
        b = await make_product("B", stock=10)
        created = await CreateSaleUseCase().execute(_sale_request((a.id, 3), (b.id, 1)), staff)

        result = await DeleteSaleUseCase().execute(created.sale.id, admin)

        assert (await fetch_product(a.id)).stock == 10
        assert (await fetch_product(b.id)).stock == 10
        restores = await fetch_log(action=InventoryAction.SALE_DELETE_RESTORE)
        assert [(e.product_id, e.delta) for e in restores] == [(a.id, 3), (b.id, 1)]
        assert all(e.sale_id == created.sale.id and e.actor_id == admin.id for e in restores)
        assert result.sale.sale_code == created.sale.sale_code

        async with SQLiteUnitOfWork(readonly=True) as uow:
            assert await uow.sales.get(created.sale.id) is None

    async def test_log_outlives_sale(self, make_product, fetch_log, staff):
        product = await make_product(stock=2)
        created = await CreateSaleUseCase().execute(_sale_request((product.id, 1)), staff)
        await DeleteSaleUseCase().execute(created.sale.id, staff)

        entries = await fetch_log(product_id=product.id)
        assert [e.action for e in entries] == [
            InventoryAction.PRODUCT_CREATE,
            InventoryAction.SALE_CREATE,
            InventoryAction.SALE_DELETE_RESTORE,
        ]

    async def test_delete_missing(self, ledger_db, staff):
        with pytest.raises(SaleNotFoundError):
            await DeleteSaleUseCase().execute(404, staff)
