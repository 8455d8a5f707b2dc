"""SQLite implementation of purchase storage."""

from datetime import datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.purchase import Purchase, PurchaseItem, PurchaseStatus
from stockledger.core.interfaces.purchase_store import IPurchaseStore
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


class SQLitePurchaseStore(IPurchaseStore):
    """Purchase store bound to the connection of one unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def create(self, purchase: Purchase) -> Purchase:
        now = now_utc()
        purchase.created_at = now
        purchase.updated_at = now
        cursor = await self._conn.execute(
            """
            INSERT INTO purchases (
                supplier_id, invoice_no, invoice_date, status,
                sub_total, discount, tax, grand_total, note, created_by,
                cancelled_at, cancel_reason, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                purchase.supplier_id,
                purchase.invoice_no,
                to_db_date(purchase.invoice_date),
                purchase.status.value,
                to_db_decimal(purchase.sub_total),
                to_db_decimal(purchase.discount),
                to_db_decimal(purchase.tax),
                to_db_decimal(purchase.grand_total),
                purchase.note,
                purchase.created_by,
                to_db_datetime(purchase.cancelled_at),
                purchase.cancel_reason,
                to_db_datetime(purchase.created_at),
                to_db_datetime(purchase.updated_at),
            ),
        )
        purchase.id = cursor.lastrowid
        await self._insert_items(purchase)
        logger.info(
            "purchase_stored",
            purchase_id=purchase.id,
            items=len(purchase.items),
        )
        return purchase

    async def get(self, purchase_id: int) -> Purchase | None:
        cursor = await self._conn.execute(
            "SELECT * FROM purchases WHERE id = ?", (purchase_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        items = await self._load_items(purchase_id)
        return self._row_to_purchase(row, items)

    async def update(self, purchase: Purchase) -> Purchase:
        purchase.updated_at = now_utc()
        await self._conn.execute(
            """
            UPDATE purchases SET
                supplier_id = ?,
                invoice_no = ?,
                invoice_date = ?,
                sub_total = ?,
                discount = ?,
                tax = ?,
                grand_total = ?,
                note = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                purchase.supplier_id,
                purchase.invoice_no,
                to_db_date(purchase.invoice_date),
                to_db_decimal(purchase.sub_total),
                to_db_decimal(purchase.discount),
                to_db_decimal(purchase.tax),
                to_db_decimal(purchase.grand_total),
                purchase.note,
                to_db_datetime(purchase.updated_at),
                purchase.id,
            ),
        )
        await self._conn.execute(
            "DELETE FROM purchase_items WHERE purchase_id = ?", (purchase.id,)
        )
        await self._insert_items(purchase)
        return purchase

    async def delete(self, purchase_id: int) -> bool:
        # Items go with the header via ON DELETE CASCADE
        cursor = await self._conn.execute(
            "DELETE FROM purchases WHERE id = ?", (purchase_id,)
        )
        return cursor.rowcount > 0

    async def update_status(self, purchase: Purchase, expected: PurchaseStatus) -> bool:
        cursor = await self._conn.execute(
            """
            UPDATE purchases SET
                status = ?,
                cancelled_at = ?,
                cancel_reason = ?,
                updated_at = ?
            WHERE id = ? AND status = ?
            """,
            (
                purchase.status.value,
                to_db_datetime(purchase.cancelled_at),
                purchase.cancel_reason,
                to_db_datetime(purchase.updated_at),
                purchase.id,
                expected.value,
            ),
        )
        return cursor.rowcount > 0

    async def list_purchases(
        self,
        supplier_id: int | None = None,
        status: PurchaseStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Purchase]:
        where, params = self._build_filters(supplier_id, status, date_from, date_to)
        cursor = await self._conn.execute(
            f"""
            SELECT * FROM purchases{where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, offset),
        )
        rows = await cursor.fetchall()
        purchases = []
        for row in rows:
            items = await self._load_items(row["id"])
            purchases.append(self._row_to_purchase(row, items))
        return purchases

    async def count_purchases(
        self,
        supplier_id: int | None = None,
        status: PurchaseStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> int:
        where, params = self._build_filters(supplier_id, status, date_from, date_to)
        cursor = await self._conn.execute(
            f"SELECT COUNT(*) FROM purchases{where}", params
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _build_filters(
        supplier_id: int | None,
        status: PurchaseStatus | None,
        date_from: datetime | None,
        date_to: datetime | None,
    ) -> tuple[str, list]:
        conditions = []
        params: list = []
        if supplier_id is not None:
            conditions.append("supplier_id = ?")
            params.append(supplier_id)
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if date_from is not None:
            conditions.append("created_at >= ?")
            params.append(to_db_datetime(date_from))
        if date_to is not None:
            conditions.append("created_at <= ?")
            params.append(to_db_datetime(date_to))
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    async def _insert_items(self, purchase: Purchase) -> None:
        await self._conn.executemany(
            """
            INSERT INTO purchase_items (
                purchase_id, position, product_id, quantity, unit_cost, line_total
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    purchase.id,
                    position,
                    item.product_id,
                    item.quantity,
                    to_db_decimal(item.unit_cost),
                    to_db_decimal(item.line_total),
                )
                for position, item in enumerate(purchase.items)
            ],
        )

    async def _load_items(self, purchase_id: int) -> list[PurchaseItem]:
        cursor = await self._conn.execute(
            "SELECT * FROM purchase_items WHERE purchase_id = ? ORDER BY position",
            (purchase_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_item(r) for r in rows]

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PurchaseItem:
        return PurchaseItem(
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_cost=from_db_decimal(row["unit_cost"]),
        )

    @staticmethod
    def _row_to_purchase(row: aiosqlite.Row, items: list[PurchaseItem]) -> Purchase:
        """Convert a database row to a Purchase entity."""
        purchase = Purchase(
            id=row["id"],
            supplier_id=row["supplier_id"],
            invoice_no=row["invoice_no"],
            invoice_date=from_db_date(row["invoice_date"]),
            status=PurchaseStatus(row["status"]),
            items=items,
            discount=from_db_decimal(row["discount"]),
            tax=from_db_decimal(row["tax"]),
            note=row["note"],
            created_by=row["created_by"],
            cancelled_at=from_db_datetime(row["cancelled_at"]),
            cancel_reason=row["cancel_reason"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
        # Keep totals as stored
        purchase.sub_total = from_db_decimal(row["sub_total"])
        purchase.grand_total = from_db_decimal(row["grand_total"])
        return purchase
