"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from stockledger.application.dto.requests import RegisterProductRequest
from stockledger.application.use_cases import RegisterProductUseCase
from stockledger.config import get_settings, reset_settings
from stockledger.core.entities.actor import Actor, ActorRole
from stockledger.core.entities.inventory_log import InventoryLogFilter
from stockledger.core.entities.product import Product
from stockledger.infrastructure.storage.sqlite import SQLiteUnitOfWork, close_pool
from stockledger.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point storage at a per-test directory."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    reset_settings()
    return tmp_path


@pytest_asyncio.fixture
async def ledger_db(data_dir: Path) -> AsyncGenerator[Path, None]:
    """Migrated database behind the global connection pool."""
    await close_pool()
    await initialize_database(create_backup_before=False)
    yield get_settings().storage.db_path
    await close_pool()
    reset_settings()


@pytest.fixture
def admin() -> Actor:
    return Actor(id=1, role=ActorRole.ADMIN, name="Admin")


@pytest.fixture
def staff() -> Actor:
    return Actor(id=2, role=ActorRole.STAFF, name="Cashier")


@pytest.fixture
def make_product(ledger_db: Path, staff: Actor):
    """Register a product through the ledger so its opening stock is logged."""

    async def _make(
        code: str = "SKU-001",
        stock: int = 0,
        price: str = "10.00",
        supplier_id: int | None = None,
        name: str | None = None,
    ) -> Product:
        result = await RegisterProductUseCase().execute(
            RegisterProductRequest(
                code=code,
                name=name or f"Product {code}",
                price=Decimal(price),
                stock=stock,
                supplier_id=supplier_id,
            ),
            staff,
        )
        return result.product

    return _make


@pytest.fixture
def fetch_product(ledger_db: Path):
    async def _fetch(product_id: int) -> Product | None:
        async with SQLiteUnitOfWork(readonly=True) as uow:
            return await uow.products.get(product_id)

    return _fetch


@pytest.fixture
def fetch_log(ledger_db: Path):
    """Read log entries oldest first."""

    async def _fetch(**filters):
        async with SQLiteUnitOfWork(readonly=True) as uow:
            entries = await uow.inventory_log.query(InventoryLogFilter(limit=1000, **filters))
        return list(reversed(entries))

    return _fetch


@pytest_asyncio.fixture
async def client(ledger_db: Path) -> AsyncGenerator[AsyncClient, None]:
    """Async client acting as a staff user."""
    from stockledger.api.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Actor-Id": "2"},
    ) as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Actor-Id": "1", "X-Actor-Role": "admin"}
