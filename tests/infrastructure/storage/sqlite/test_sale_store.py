"""Tests for SQLiteSaleStore and the per-day sale sequence."""

from datetime import date
from decimal import Decimal

import pytest

from stockledger.core.entities.product import Product
from stockledger.core.entities.sale import Sale, SaleLine
from stockledger.core.exceptions import SaleCodeConflictError
from stockledger.infrastructure.storage.sqlite import SQLiteUnitOfWork


async def _seed_product() -> int:
    async with SQLiteUnitOfWork() as uow:
        product = await uow.products.create(Product(code="A", name="Alpha", stock=10))
    return product.id


def _sale(product_id: int, code: str = "INV-20240115-0001") -> Sale:
    return Sale(
        sale_code=code,
        customer_id=5,
        sale_date=date(2024, 1, 15),
        lines=[SaleLine(product_id=product_id, quantity=2, unit_price=Decimal("7.50"))],
        discount=Decimal("10"),
        created_by=2,
        updated_by=2,
    )


class TestSaleSequence:
    async def test_sequence_is_per_day(self, ledger_db):
        async with SQLiteUnitOfWork() as uow:
            assert await uow.sales.next_sequence(date(2024, 1, 15)) == 1
            assert await uow.sales.next_sequence(date(2024, 1, 15)) == 2
            assert await uow.sales.next_sequence(date(2024, 1, 16)) == 1

    async def test_sequence_rolls_back_with_transaction(self, ledger_db):
        with pytest.raises(RuntimeError):
            async with SQLiteUnitOfWork() as uow:
                await uow.sales.next_sequence(date(2024, 1, 15))
                raise RuntimeError("abort")

        async with SQLiteUnitOfWork() as uow:
            assert await uow.sales.next_sequence(date(2024, 1, 15)) == 1


class TestSaleStore:
    async def test_create_and_get(self, ledger_db):
        product_id = await _seed_product()
        async with SQLiteUnitOfWork() as uow:
            created = await uow.sales.create(_sale(product_id))

        async with SQLiteUnitOfWork(readonly=True) as uow:
            sale = await uow.sales.get(created.id)

        assert sale.sale_code == "INV-20240115-0001"
        assert sale.lines[0].total_price == Decimal("15.00")
        assert sale.total_amount == Decimal("15.00")
        assert sale.discounted_amount == Decimal("13.50")

    async def test_duplicate_code(self, ledger_db):
        product_id = await _seed_product()
        async with SQLiteUnitOfWork() as uow:
            await uow.sales.create(_sale(product_id))
            with pytest.raises(SaleCodeConflictError):
                await uow.sales.create(_sale(product_id))

    async def test_update_replaces_lines(self, ledger_db):
        product_id = await _seed_product()
        async with SQLiteUnitOfWork() as uow:
            sale = await uow.sales.create(_sale(product_id))
            sale.lines = [SaleLine(product_id=product_id, quantity=5, unit_price=Decimal("7.50"))]
            sale.recompute_totals()
            await uow.sales.update(sale)

        async with SQLiteUnitOfWork(readonly=True) as uow:
            loaded = await uow.sales.get(sale.id)
        assert [line.quantity for line in loaded.lines] == [5]
        assert loaded.total_amount == Decimal("37.50")

    async def test_delete_and_list(self, ledger_db):
        product_id = await _seed_product()
        async with SQLiteUnitOfWork() as uow:
            first = await uow.sales.create(_sale(product_id, "INV-20240115-0001"))
            second = await uow.sales.create(_sale(product_id, "INV-20240115-0002"))
            assert await uow.sales.delete(first.id)
            assert not await uow.sales.delete(first.id)

        async with SQLiteUnitOfWork(readonly=True) as uow:
            sales = await uow.sales.list_sales()
            assert await uow.sales.count_sales() == 1
        assert [s.id for s in sales] == [second.id]
