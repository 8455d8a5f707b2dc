"""Tests for sale code formatting and allocation."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from stockledger.core.entities.sale import Sale
from stockledger.core.exceptions import SaleCodeConflictError, SaleCodeExhaustedError
from stockledger.core.services.sale_codes import SaleCodeAllocator, format_sale_code

DAY = date(2024, 1, 15)


class TestFormatSaleCode:
    def test_default_width(self):
        assert format_sale_code("INV", DAY, 1) == "INV-20240115-0001"

    def test_custom_prefix_and_width(self):
        assert format_sale_code("POS", DAY, 42, digits=6) == "POS-20240115-000042"

    def test_number_wider_than_padding(self):
        assert format_sale_code("INV", DAY, 12345) == "INV-20240115-12345"


@pytest.fixture
def mock_sale_store():
    store = AsyncMock()
    store.create.side_effect = lambda sale: sale
    return store


class TestSaleCodeAllocator:
    async def test_uses_next_sequence(self, mock_sale_store):
        mock_sale_store.next_sequence.return_value = 3
        allocator = SaleCodeAllocator(mock_sale_store)

        sale = await allocator.create(Sale(), day=DAY)

        assert sale.sale_code == "INV-20240115-0003"
        mock_sale_store.next_sequence.assert_called_once_with(DAY)

    async def test_retries_on_collision(self, mock_sale_store):
        mock_sale_store.next_sequence.side_effect = [1, 2]
        mock_sale_store.create.side_effect = [
            SaleCodeConflictError("INV-20240115-0001"),
            Sale(id=9, sale_code="INV-20240115-0002"),
        ]
        allocator = SaleCodeAllocator(mock_sale_store)

        sale = await allocator.create(Sale(), day=DAY)

        assert sale.id == 9
        assert mock_sale_store.create.call_count == 2

    async def test_gives_up_after_max_retries(self, mock_sale_store):
        mock_sale_store.next_sequence.side_effect = [1, 2, 3]
        mock_sale_store.create.side_effect = SaleCodeConflictError("taken")
        allocator = SaleCodeAllocator(mock_sale_store, max_retries=3)

        with pytest.raises(SaleCodeExhaustedError) as exc_info:
            await allocator.create(Sale(), day=DAY)
        assert exc_info.value.details == {"day": "2024-01-15", "attempts": 3}

    async def test_defaults_to_today(self, mock_sale_store):
        mock_sale_store.next_sequence.return_value = 1
        sale = await SaleCodeAllocator(mock_sale_store, prefix="POS").create(Sale())
        assert sale.sale_code.startswith("POS-")
        assert sale.sale_code.endswith("-0001")
