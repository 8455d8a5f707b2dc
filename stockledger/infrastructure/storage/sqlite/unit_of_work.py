"""
SQLite unit of work.

One pooled connection and one transaction per top-level ledger operation.
Mutations open the transaction with BEGIN IMMEDIATE, which takes the
database write lock up front: concurrent writers queue on busy_timeout
instead of interleaving, and nothing written inside the block is visible
to other connections until the single commit.
"""

from contextlib import AsyncExitStack
from types import TracebackType

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.exceptions import DatabaseError
from stockledger.core.interfaces.unit_of_work import IUnitOfWork
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from stockledger.infrastructure.storage.sqlite.inventory_log_store import (
    SQLiteInventoryLogStore,
)
from stockledger.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from stockledger.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from stockledger.infrastructure.storage.sqlite.sale_store import SQLiteSaleStore

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    Usage:
        async with SQLiteUnitOfWork() as uow:
            await uow.products.get(1)

    Commits on normal exit, rolls back on any exception (cancellation
    included). A unit of work is single-use.
    """

    def __init__(self, pool: ConnectionPool | None = None, readonly: bool = False):
        self._pool = pool
        self._readonly = readonly
        self._stack: AsyncExitStack | None = None
        self._conn: aiosqlite.Connection | None = None
        self._entered = False
        self._finished = False

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Unit of work is not active")
        return self._conn

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        if self._entered:
            raise RuntimeError("Unit of work cannot be reused")
        self._entered = True

        pool = self._pool or await get_pool()
        self._stack = AsyncExitStack()
        try:
            conn = await self._stack.enter_async_context(pool.acquire())
            await conn.execute("BEGIN" if self._readonly else "BEGIN IMMEDIATE")
        except aiosqlite.Error as e:
            await self._stack.aclose()
            raise DatabaseError("begin", str(e)) from e
        except BaseException:
            await self._stack.aclose()
            raise

        self._conn = conn
        self.products = SQLiteProductStore(conn)
        self.purchases = SQLitePurchaseStore(conn)
        self.sales = SQLiteSaleStore(conn)
        self.inventory_log = SQLiteInventoryLogStore(conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        error: DatabaseError | None = None
        cause = exc
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
                logger.debug(
                    "unit_of_work_rolled_back",
                    error_type=exc_type.__name__,
                )
                if isinstance(exc, aiosqlite.Error):
                    error = DatabaseError("transaction", str(exc))
        except aiosqlite.Error as e:
            error = DatabaseError("commit" if exc_type is None else "rollback", str(e))
            cause = e
        finally:
            stack, self._stack = self._stack, None
            self._conn = None
            if stack is not None:
                await stack.aclose()

        # Driver errors leave here as DatabaseError; ledger errors pass through
        if error is not None:
            logger.error("unit_of_work_storage_error", error=error.message)
            raise error from cause

    async def commit(self) -> None:
        if self._finished:
            return
        await self.connection.commit()
        self._finished = True

    async def rollback(self) -> None:
        if self._finished:
            return
        self._finished = True
        await self.connection.rollback()
