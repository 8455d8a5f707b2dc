"""Tests for the stock ledger service against mocked stores."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from stockledger.core.entities.actor import Actor
from stockledger.core.entities.inventory_log import InventoryAction
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import (
    InsufficientStockError,
    ProductDeletedError,
    ProductNotFoundError,
)
from stockledger.core.services.stock_ledger import StockLedger, load_active_products


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.products = AsyncMock()
    uow.inventory_log = AsyncMock()
    uow.inventory_log.append.side_effect = lambda entry: entry
    return uow


@pytest.fixture
def ledger(mock_uow):
    return StockLedger(mock_uow, Actor(id=7))


class TestReceive:
    async def test_updates_average_and_logs(self, ledger, mock_uow):
        mock_uow.products.get.return_value = Product(
            id=1, code="A", name="A", stock=100, avg_cost=Decimal("10.0000")
        )
        mock_uow.products.apply_receipt.return_value = 150

        entry = await ledger.receive(1, 50, Decimal("12"), purchase_id=4, note="purchase:4")

        mock_uow.products.apply_receipt.assert_called_once_with(
            1, 50, Decimal("10.6667"), Decimal("12.0000")
        )
        assert entry.action == InventoryAction.PURCHASE_POST
        assert (entry.before_qty, entry.delta, entry.after_qty) == (100, 50, 150)
        assert entry.actor_id == 7
        assert entry.purchase_id == 4
        assert ledger.entries == [entry]

    async def test_rejects_archived_product(self, ledger, mock_uow):
        mock_uow.products.get.return_value = Product(id=1, code="A", name="A", is_deleted=True)
        with pytest.raises(ProductDeletedError):
            await ledger.receive(1, 5, Decimal("1"))
        mock_uow.inventory_log.append.assert_not_called()


class TestIssue:
    async def test_conditional_decrement(self, ledger, mock_uow):
        mock_uow.products.decrement_if_available.return_value = 7

        entry = await ledger.issue(1, 3, action=InventoryAction.SALE_CREATE, sale_id=9)

        assert (entry.before_qty, entry.delta, entry.after_qty) == (10, -3, 7)
        assert entry.sale_id == 9

    async def test_insufficient_stock(self, ledger, mock_uow):
        mock_uow.products.decrement_if_available.return_value = None
        mock_uow.products.get.return_value = Product(id=1, code="A", name="Cable", stock=3)

        with pytest.raises(InsufficientStockError) as exc_info:
            await ledger.issue(1, 5, action=InventoryAction.SALE_CREATE)

        assert exc_info.value.details == {"product_id": 1, "requested": 5, "available": 3}
        mock_uow.inventory_log.append.assert_not_called()

    async def test_missing_product(self, ledger, mock_uow):
        mock_uow.products.decrement_if_available.return_value = None
        mock_uow.products.get.return_value = None
        with pytest.raises(ProductNotFoundError):
            await ledger.issue(1, 5, action=InventoryAction.SALE_CREATE)


class TestRestoreAndAdjust:
    async def test_restore_allows_archived_product(self, ledger, mock_uow):
        mock_uow.products.get.return_value = Product(id=1, code="A", name="A", is_deleted=True)
        mock_uow.products.increment.return_value = 12

        entry = await ledger.restore(1, 2, action=InventoryAction.SALE_DELETE_RESTORE, sale_id=3)

        assert (entry.before_qty, entry.delta, entry.after_qty) == (10, 2, 12)

    async def test_adjust_logs_delta(self, ledger, mock_uow):
        mock_uow.products.get.return_value = Product(id=1, code="A", name="A", stock=10)
        mock_uow.products.set_stock.return_value = 6

        entry = await ledger.adjust(1, 6, note="cycle count")

        assert entry.action == InventoryAction.STOCK_ADJUST
        assert entry.delta == -4

    async def test_adjust_unchanged_is_not_logged(self, ledger, mock_uow):
        mock_uow.products.get.return_value = Product(id=1, code="A", name="A", stock=10)
        assert await ledger.adjust(1, 10) is None
        mock_uow.products.set_stock.assert_not_called()

    async def test_open_logs_opening_stock(self, ledger):
        entry = await ledger.open(Product(id=1, code="A", name="A", stock=25))
        assert entry.action == InventoryAction.PRODUCT_CREATE
        assert (entry.before_qty, entry.delta, entry.after_qty) == (0, 25, 25)


class TestLoadActiveProducts:
    async def test_loads_each_product_once(self):
        store = AsyncMock()
        store.get.side_effect = lambda pid: Product(id=pid, code=f"P{pid}", name="x")
        products = await load_active_products(store, [1, 2, 1])
        assert list(products) == [1, 2]
        assert store.get.call_count == 2

    async def test_missing_reports_index(self):
        store = AsyncMock()
        store.get.side_effect = [Product(id=1, code="P1", name="x"), None]
        with pytest.raises(ProductNotFoundError) as exc_info:
            await load_active_products(store, [1, 2])
        assert exc_info.value.details["index"] == 1

    async def test_archived_rejected(self):
        store = AsyncMock()
        store.get.return_value = Product(id=1, code="P1", name="x", is_deleted=True)
        with pytest.raises(ProductDeletedError):
            await load_active_products(store, [1])
