"""SQLite implementation of sale storage and the per-day sale sequence."""

from datetime import date

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.sale import Sale, SaleLine
from stockledger.core.exceptions import SaleCodeConflictError
from stockledger.core.interfaces.sale_store import ISaleStore
from stockledger.infrastructure.storage.sqlite.codec import (
    from_db_date,
    from_db_datetime,
    from_db_decimal,
    now_utc,
    to_db_date,
    to_db_datetime,
    to_db_decimal,
)

logger = get_logger(__name__)


class SQLiteSaleStore(ISaleStore):
    """Sale store bound to the connection of one unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def next_sequence(self, day: date) -> int:
        key = day.strftime("%Y%m%d")
        await self._conn.execute(
            """
            INSERT INTO sale_sequences (day, last_value) VALUES (?, 1)
            ON CONFLICT(day) DO UPDATE SET last_value = last_value + 1
            """,
            (key,),
        )
        cursor = await self._conn.execute(
            "SELECT last_value FROM sale_sequences WHERE day = ?", (key,)
        )
        row = await cursor.fetchone()
        return row["last_value"]

    async def create(self, sale: Sale) -> Sale:
        now = now_utc()
        sale.created_at = now
        sale.updated_at = now
        try:
            cursor = await self._conn.execute(
                """
                INSERT INTO sales (
                    sale_code, customer_id, sale_date, total_amount, discount,
                    discounted_amount, created_by, updated_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.sale_code,
                    sale.customer_id,
                    to_db_date(sale.sale_date),
                    to_db_decimal(sale.total_amount),
                    to_db_decimal(sale.discount),
                    to_db_decimal(sale.discounted_amount),
                    sale.created_by,
                    sale.updated_by,
                    to_db_datetime(sale.created_at),
                    to_db_datetime(sale.updated_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "sales.sale_code" in str(e):
                raise SaleCodeConflictError(sale.sale_code or "") from e
            raise
        sale.id = cursor.lastrowid
        await self._insert_lines(sale)
        logger.info("sale_stored", sale_id=sale.id, sale_code=sale.sale_code)
        return sale

    async def get(self, sale_id: int) -> Sale | None:
        cursor = await self._conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        lines = await self._load_lines(sale_id)
        return self._row_to_sale(row, lines)

    async def update(self, sale: Sale) -> Sale:
        sale.updated_at = now_utc()
        await self._conn.execute(
            """
            UPDATE sales SET
                customer_id = ?,
                sale_date = ?,
                total_amount = ?,
                discount = ?,
                discounted_amount = ?,
                updated_by = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                sale.customer_id,
                to_db_date(sale.sale_date),
                to_db_decimal(sale.total_amount),
                to_db_decimal(sale.discount),
                to_db_decimal(sale.discounted_amount),
                sale.updated_by,
                to_db_datetime(sale.updated_at),
                sale.id,
            ),
        )
        await self._conn.execute("DELETE FROM sale_lines WHERE sale_id = ?", (sale.id,))
        await self._insert_lines(sale)
        return sale

    async def delete(self, sale_id: int) -> bool:
        cursor = await self._conn.execute("DELETE FROM sales WHERE id = ?", (sale_id,))
        return cursor.rowcount > 0

    async def list_sales(self, limit: int = 50, offset: int = 0) -> list[Sale]:
        cursor = await self._conn.execute(
            """
            SELECT * FROM sales
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )
        rows = await cursor.fetchall()
        sales = []
        for row in rows:
            lines = await self._load_lines(row["id"])
            sales.append(self._row_to_sale(row, lines))
        return sales

    async def count_sales(self) -> int:
        cursor = await self._conn.execute("SELECT COUNT(*) FROM sales")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def _insert_lines(self, sale: Sale) -> None:
        await self._conn.executemany(
            """
            INSERT INTO sale_lines (
                sale_id, position, product_id, quantity, unit_price, total_price
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    sale.id,
                    position,
                    line.product_id,
                    line.quantity,
                    to_db_decimal(line.unit_price),
                    to_db_decimal(line.total_price),
                )
                for position, line in enumerate(sale.lines)
            ],
        )

    async def _load_lines(self, sale_id: int) -> list[SaleLine]:
        cursor = await self._conn.execute(
            "SELECT * FROM sale_lines WHERE sale_id = ? ORDER BY position",
            (sale_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_line(r) for r in rows]

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> SaleLine:
        return SaleLine(
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_price=from_db_decimal(row["unit_price"]),
        )

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row, lines: list[SaleLine]) -> Sale:
        """Convert a database row to a Sale entity."""
        sale = Sale(
            id=row["id"],
            sale_code=row["sale_code"],
            customer_id=row["customer_id"],
            sale_date=from_db_date(row["sale_date"]),
            lines=lines,
            discount=from_db_decimal(row["discount"]),
            created_by=row["created_by"],
            updated_by=row["updated_by"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
        sale.total_amount = from_db_decimal(row["total_amount"])
        sale.discounted_amount = from_db_decimal(row["discounted_amount"])
        return sale
