"""SQLite implementation of the inventory snapshot ledger."""

from datetime import datetime

import aiosqlite

from shelfwise.config import get_logger
from shelfwise.core.entities.inventory import InventorySnapshot
from shelfwise.core.interfaces.inventory_ledger import IInventoryLedger
from shelfwise.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

# Newest first; id breaks ties between snapshots written in the same instant
_LATEST_ORDER = "ORDER BY snapshot_date DESC, id DESC"


class SQLiteInventoryLedger(IInventoryLedger):
    """Time-series of quantity-on-hand per product."""

    async def latest_snapshot(self, product_id: str) -> InventorySnapshot | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_snapshots WHERE product_id = ? {_LATEST_ORDER} LIMIT 1",
                (product_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_snapshot(row) if row else None

    async def append_snapshot(
        self, store_id: str, product_id: str, quantity: float
    ) -> InventorySnapshot:
        snapshot = InventorySnapshot(
            store_id=store_id,
            product_id=product_id,
            quantity_on_hand=quantity,
        )
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_snapshots (store_id, product_id, quantity_on_hand, snapshot_date)
                VALUES (?, ?, ?, ?)
                """,
                (
                    snapshot.store_id,
                    snapshot.product_id,
                    snapshot.quantity_on_hand,
                    snapshot.snapshot_date.isoformat(),
                ),
            )
            snapshot.id = cursor.lastrowid
        logger.debug(
            "inventory_snapshot_appended",
            product_id=product_id,
            quantity=quantity,
            snapshot_id=snapshot.id,
        )
        return snapshot

    async def update_latest(self, product_id: str, quantity: float) -> InventorySnapshot | None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_snapshots WHERE product_id = ? {_LATEST_ORDER} LIMIT 1",
                (product_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            await conn.execute(
                "UPDATE inventory_snapshots SET quantity_on_hand = ? WHERE id = ?",
                (quantity, row["id"]),
            )
        snapshot = self._row_to_snapshot(row)
        snapshot.quantity_on_hand = quantity
        logger.debug(
            "inventory_snapshot_rewritten",
            product_id=product_id,
            quantity=quantity,
            snapshot_id=snapshot.id,
        )
        return snapshot

    async def list_snapshots(
        self, product_id: str, limit: int = 100
    ) -> list[InventorySnapshot]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_snapshots WHERE product_id = ? {_LATEST_ORDER} LIMIT ?",
                (product_id, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_snapshot(row) for row in rows]

    @staticmethod
    def _row_to_snapshot(row: aiosqlite.Row) -> InventorySnapshot:
        return InventorySnapshot(
            id=row["id"],
            store_id=row["store_id"],
            product_id=row["product_id"],
            quantity_on_hand=row["quantity_on_hand"],
            snapshot_date=datetime.fromisoformat(row["snapshot_date"]),
        )
