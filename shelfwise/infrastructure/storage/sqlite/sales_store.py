"""SQLite implementation of sales storage."""

from datetime import datetime

import aiosqlite

from shelfwise.config import get_logger
from shelfwise.core.entities.sale import Sale, SaleItem
from shelfwise.core.interfaces.sales_store import ISalesStore
from shelfwise.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteSalesStore(ISalesStore):
    """Sales with their items."""

    async def create_sale(self, sale: Sale) -> Sale:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO sales (id, store_id, receipt_id, source, total_amount, sold_at, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.id,
                    sale.store_id,
                    sale.receipt_id,
                    sale.source,
                    sale.total_amount,
                    sale.sold_at.isoformat(),
                    sale.created_at.isoformat(),
                ),
            )
            for item in sale.items:
                cursor = await conn.execute(
                    """
                    INSERT INTO sale_items (sale_id, product_id, quantity, unit_price, line_total)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (sale.id, item.product_id, item.quantity, item.unit_price, item.line_total),
                )
                item.id = cursor.lastrowid
                item.sale_id = sale.id

        logger.info(
            "sale_created",
            sale_id=sale.id,
            receipt_id=sale.receipt_id,
            items=len(sale.items),
            total=sale.total_amount,
        )
        return sale

    async def get_sale(self, sale_id: str) -> Sale | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM sales WHERE id = ?", (sale_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            cursor = await conn.execute(
                "SELECT * FROM sale_items WHERE sale_id = ? ORDER BY id", (sale_id,)
            )
            item_rows = await cursor.fetchall()

        return self._row_to_sale(row, [self._row_to_item(r) for r in item_rows])

    async def list_sales(
        self, store_id: str, limit: int = 100, offset: int = 0
    ) -> list[Sale]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM sales WHERE store_id = ?
                ORDER BY sold_at DESC LIMIT ? OFFSET ?
                """,
                (store_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sale(row, []) for row in rows]

    @staticmethod
    def _row_to_sale(row: aiosqlite.Row, items: list[SaleItem]) -> Sale:
        sale = Sale(
            id=row["id"],
            store_id=row["store_id"],
            receipt_id=row["receipt_id"],
            source=row["source"],
            sold_at=datetime.fromisoformat(row["sold_at"]),
            items=items,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
        # Listings carry no items; keep the stored total
        sale.total_amount = row["total_amount"]
        return sale

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> SaleItem:
        return SaleItem(
            id=row["id"],
            sale_id=row["sale_id"],
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
        )
