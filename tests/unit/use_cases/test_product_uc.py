"""Tests for product registration, stock adjustment, archive and restore."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from stockledger.application.dto.requests import AdjustStockRequest, RegisterProductRequest
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    ArchiveProductUseCase,
    RegisterProductUseCase,
    RestoreProductUseCase,
)
from stockledger.core.entities.inventory_log import InventoryAction
from stockledger.core.exceptions import (
    DuplicateProductCodeError,
    PermissionDeniedError,
    ProductDeletedError,
    ProductNotFoundError,
    ValidationError,
)


class TestRegisterProduct:
    async def test_register_logs_opening_stock(self, ledger_db, fetch_log, staff):
        result = await RegisterProductUseCase().execute(
            RegisterProductRequest(code=" SKU-9 ", name="Cable", price=Decimal("3.5"), stock=12),
            staff,
        )

        assert result.product.code == "SKU-9"
        assert result.product.price == Decimal("3.50")
        assert result.log_entry.action == InventoryAction.PRODUCT_CREATE
        assert (result.log_entry.before_qty, result.log_entry.after_qty) == (0, 12)
        assert len(await fetch_log(product_id=result.product.id)) == 1

    async def test_zero_opening_stock_still_logged(self, make_product, fetch_log):
        product = await make_product(stock=0)
        entries = await fetch_log(product_id=product.id)
        assert [(e.delta, e.after_qty) for e in entries] == [(0, 0)]

    async def test_duplicate_code(self, make_product, staff):
        await make_product("SKU-1")
        with pytest.raises(DuplicateProductCodeError):
            await RegisterProductUseCase().execute(
                RegisterProductRequest(code="SKU-1", name="Again"), staff
            )

    @pytest.mark.parametrize(
        "fields,bad_field",
        [
            ({"code": "  ", "name": "x"}, "code"),
            ({"code": "A", "name": ""}, "name"),
            ({"code": "A", "name": "x", "price": Decimal("-1")}, "price"),
            ({"code": "A", "name": "x", "stock": -1}, "stock"),
        ],
    )
    async def test_invalid_fields(self, staff, fields, bad_field):
        uow_factory = MagicMock()
        with pytest.raises(ValidationError) as exc_info:
            await RegisterProductUseCase(uow_factory=uow_factory).execute(
                RegisterProductRequest(**fields), staff
            )
        assert exc_info.value.details["field"] == bad_field
        uow_factory.assert_not_called()


class TestAdjustStock:
    async def test_adjust_logs_delta(self, make_product, staff):
        product = await make_product(stock=10)

        result = await AdjustStockUseCase().execute(
            product.id, AdjustStockRequest(quantity=7, note="cycle count"), staff
        )

        assert result.product.stock == 7
        assert result.log_entry.action == InventoryAction.STOCK_ADJUST
        assert (result.log_entry.delta, result.log_entry.note) == (-3, "cycle count")

    async def test_unchanged_quantity_is_not_logged(self, make_product, fetch_log, staff):
        product = await make_product(stock=10)
        result = await AdjustStockUseCase().execute(product.id, AdjustStockRequest(quantity=10), staff)
        assert result.log_entry is None
        assert len(await fetch_log(product_id=product.id)) == 1

    async def test_negative_rejected(self, make_product, staff):
        product = await make_product(stock=10)
        with pytest.raises(ValidationError):
            await AdjustStockUseCase().execute(product.id, AdjustStockRequest(quantity=-1), staff)

    async def test_missing_and_archived(self, make_product, staff):
        with pytest.raises(ProductNotFoundError):
            await AdjustStockUseCase().execute(404, AdjustStockRequest(quantity=1), staff)

        product = await make_product()
        await ArchiveProductUseCase().execute(product.id, staff)
        with pytest.raises(ProductDeletedError):
            await AdjustStockUseCase().execute(product.id, AdjustStockRequest(quantity=1), staff)


class TestArchiveRestore:
    async def test_archive_keeps_stock(self, make_product, fetch_product, staff):
        product = await make_product(stock=4)
        result = await ArchiveProductUseCase().execute(product.id, staff)
        assert result.product.is_deleted
        stored = await fetch_product(product.id)
        assert stored.is_deleted and stored.stock == 4

    async def test_archive_twice(self, make_product, staff):
        product = await make_product()
        await ArchiveProductUseCase().execute(product.id, staff)
        with pytest.raises(ProductDeletedError):
            await ArchiveProductUseCase().execute(product.id, staff)

    async def test_archive_and_restore_write_no_log(self, make_product, fetch_log, admin, staff):
        product = await make_product(stock=4)
        before = await fetch_log(product_id=product.id)

        await ArchiveProductUseCase().execute(product.id, staff)
        await RestoreProductUseCase().execute(product.id, admin)

        after = await fetch_log(product_id=product.id)
        assert [e.id for e in after] == [e.id for e in before]
        assert [e.action for e in after] == [InventoryAction.PRODUCT_CREATE]

    async def test_restore_admin_only(self, make_product, staff):
        product = await make_product()
        await ArchiveProductUseCase().execute(product.id, staff)
        with pytest.raises(PermissionDeniedError):
            await RestoreProductUseCase().execute(product.id, staff)

    async def test_restore(self, make_product, fetch_product, admin, staff):
        product = await make_product()
        await ArchiveProductUseCase().execute(product.id, staff)

        result = await RestoreProductUseCase().execute(product.id, admin)

        assert not result.product.is_deleted
        assert not (await fetch_product(product.id)).is_deleted
        # Restoring an active product is a no-op
        assert not (await RestoreProductUseCase().execute(product.id, admin)).product.is_deleted

    async def test_missing(self, ledger_db, admin):
        with pytest.raises(ProductNotFoundError):
            await ArchiveProductUseCase().execute(404, admin)
        with pytest.raises(ProductNotFoundError):
            await RestoreProductUseCase().execute(404, admin)
