"""SQLite implementation of the append-only inventory log.

UPDATE and DELETE are rejected by triggers in the schema; this store only
ever inserts and selects.
"""

import aiosqlite

from stockledger.core.entities.inventory_log import (
    InventoryAction,
    InventoryLogEntry,
    InventoryLogFilter,
)
from stockledger.core.interfaces.inventory_log_store import IInventoryLogStore
from stockledger.infrastructure.storage.sqlite.codec import from_db_datetime, to_db_datetime


class SQLiteInventoryLogStore(IInventoryLogStore):
    """Inventory log store bound to the connection of one unit of work."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, entry: InventoryLogEntry) -> InventoryLogEntry:
        cursor = await self._conn.execute(
            """
            INSERT INTO inventory_log (
                product_id, action, delta, before_qty, after_qty,
                actor_id, sale_id, purchase_id, note, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.product_id,
                entry.action.value,
                entry.delta,
                entry.before_qty,
                entry.after_qty,
                entry.actor_id,
                entry.sale_id,
                entry.purchase_id,
                entry.note,
                to_db_datetime(entry.created_at),
            ),
        )
        return entry.model_copy(update={"id": cursor.lastrowid})

    async def query(self, log_filter: InventoryLogFilter) -> list[InventoryLogEntry]:
        where, params = self._build_filters(log_filter)
        cursor = await self._conn.execute(
            f"""
            SELECT * FROM inventory_log{where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (*params, log_filter.limit, log_filter.offset),
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def count(self, log_filter: InventoryLogFilter) -> int:
        where, params = self._build_filters(log_filter)
        cursor = await self._conn.execute(
            f"SELECT COUNT(*) FROM inventory_log{where}", params
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _build_filters(log_filter: InventoryLogFilter) -> tuple[str, list]:
        conditions = []
        params: list = []
        if log_filter.product_id is not None:
            conditions.append("product_id = ?")
            params.append(log_filter.product_id)
        if log_filter.action is not None:
            conditions.append("action = ?")
            params.append(log_filter.action.value)
        if log_filter.actor_id is not None:
            conditions.append("actor_id = ?")
            params.append(log_filter.actor_id)
        if log_filter.date_from is not None:
            conditions.append("created_at >= ?")
            params.append(to_db_datetime(log_filter.date_from))
        if log_filter.date_to is not None:
            conditions.append("created_at <= ?")
            params.append(to_db_datetime(log_filter.date_to))
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> InventoryLogEntry:
        return InventoryLogEntry(
            id=row["id"],
            product_id=row["product_id"],
            action=InventoryAction(row["action"]),
            delta=row["delta"],
            before_qty=row["before_qty"],
            after_qty=row["after_qty"],
            actor_id=row["actor_id"],
            sale_id=row["sale_id"],
            purchase_id=row["purchase_id"],
            note=row["note"],
            created_at=from_db_datetime(row["created_at"]),
        )
