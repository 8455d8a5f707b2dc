"""SQLite implementation of product ledger state storage."""

from decimal import Decimal

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import DuplicateProductCodeError, ProductNotFoundError
from stockledger.core.interfaces.product_store import IProductStore
from stockledger.infrastructure.storage.sqlite.codec import (
    from_db_datetime,
    from_db_decimal,
    now_utc,
    to_db_datetime,
    to_db_decimal,
)

logger = get_logger(__name__)


class SQLiteProductStore(IProductStore):
    """Product store bound to the connection of one unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, product_id: int) -> Product | None:
        cursor = await self._conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_product(row)

    async def get_by_code(self, code: str) -> Product | None:
        cursor = await self._conn.execute(
            "SELECT * FROM products WHERE code = ?", (code,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_product(row)

    async def list_products(
        self, limit: int = 100, offset: int = 0, include_deleted: bool = False
    ) -> list[Product]:
        query = "SELECT * FROM products"
        if not include_deleted:
            query += " WHERE is_deleted = 0"
        query += " ORDER BY code LIMIT ? OFFSET ?"
        cursor = await self._conn.execute(query, (limit, offset))
        rows = await cursor.fetchall()
        return [self._row_to_product(row) for row in rows]

    async def count_products(self, include_deleted: bool = False) -> int:
        query = "SELECT COUNT(*) FROM products"
        if not include_deleted:
            query += " WHERE is_deleted = 0"
        cursor = await self._conn.execute(query)
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def create(self, product: Product) -> Product:
        now = now_utc()
        product.created_at = now
        product.updated_at = now
        try:
            cursor = await self._conn.execute(
                """
                INSERT INTO products (
                    code, name, price, stock, avg_cost, last_cost,
                    supplier_id, is_deleted, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product.code,
                    product.name,
                    to_db_decimal(product.price),
                    product.stock,
                    to_db_decimal(product.avg_cost),
                    to_db_decimal(product.last_cost),
                    product.supplier_id,
                    int(product.is_deleted),
                    to_db_datetime(product.created_at),
                    to_db_datetime(product.updated_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "products.code" in str(e):
                raise DuplicateProductCodeError(product.code) from e
            raise
        product.id = cursor.lastrowid
        logger.info("product_created", product_id=product.id, code=product.code)
        return product

    async def set_deleted(self, product_id: int, deleted: bool) -> bool:
        cursor = await self._conn.execute(
            "UPDATE products SET is_deleted = ?, updated_at = ? WHERE id = ? AND is_deleted = ?",
            (int(deleted), to_db_datetime(now_utc()), product_id, int(not deleted)),
        )
        return cursor.rowcount > 0

    async def bind_supplier(self, product_id: int, supplier_id: int) -> bool:
        cursor = await self._conn.execute(
            """
            UPDATE products SET supplier_id = ?, updated_at = ?
            WHERE id = ? AND supplier_id IS NULL
            """,
            (supplier_id, to_db_datetime(now_utc()), product_id),
        )
        return cursor.rowcount > 0

    async def apply_receipt(
        self, product_id: int, quantity: int, avg_cost: Decimal, last_cost: Decimal
    ) -> int:
        cursor = await self._conn.execute(
            """
            UPDATE products SET
                stock = stock + ?,
                avg_cost = ?,
                last_cost = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                quantity,
                to_db_decimal(avg_cost),
                to_db_decimal(last_cost),
                to_db_datetime(now_utc()),
                product_id,
            ),
        )
        if cursor.rowcount == 0:
            raise ProductNotFoundError(product_id)
        return await self._read_stock(product_id)

    async def decrement_if_available(self, product_id: int, quantity: int) -> int | None:
        cursor = await self._conn.execute(
            """
            UPDATE products SET stock = stock - ?, updated_at = ?
            WHERE id = ? AND stock >= ?
            """,
            (quantity, to_db_datetime(now_utc()), product_id, quantity),
        )
        if cursor.rowcount == 0:
            return None
        return await self._read_stock(product_id)

    async def increment(self, product_id: int, quantity: int) -> int:
        cursor = await self._conn.execute(
            "UPDATE products SET stock = stock + ?, updated_at = ? WHERE id = ?",
            (quantity, to_db_datetime(now_utc()), product_id),
        )
        if cursor.rowcount == 0:
            raise ProductNotFoundError(product_id)
        return await self._read_stock(product_id)

    async def set_stock(self, product_id: int, stock: int) -> int:
        cursor = await self._conn.execute(
            "UPDATE products SET stock = ?, updated_at = ? WHERE id = ?",
            (stock, to_db_datetime(now_utc()), product_id),
        )
        if cursor.rowcount == 0:
            raise ProductNotFoundError(product_id)
        return await self._read_stock(product_id)

    async def _read_stock(self, product_id: int) -> int:
        cursor = await self._conn.execute(
            "SELECT stock FROM products WHERE id = ?", (product_id,)
        )
        row = await cursor.fetchone()
        return row["stock"]

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        """Convert a database row to a Product entity."""
        return Product(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            price=from_db_decimal(row["price"]),
            stock=row["stock"],
            avg_cost=from_db_decimal(row["avg_cost"]),
            last_cost=from_db_decimal(row["last_cost"]),
            supplier_id=row["supplier_id"],
            is_deleted=bool(row["is_deleted"]),
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
