"""SQLite implementation of the product catalog."""

from datetime import datetime
from typing import Any

import aiosqlite

from shelfwise.config import get_logger
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.exceptions import ProductNotFoundError
from shelfwise.core.interfaces.catalog_store import ICatalogStore
from shelfwise.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _parse_timestamp(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.debug("timestamp_unparseable", value=value)
    return datetime.utcnow()


class SQLiteCatalogStore(ICatalogStore):
    """Store-scoped product catalog backed by the products table."""

    async def find_by_id(self, product_id: str) -> CatalogProduct | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def find_by_barcode(self, store_id: str, barcode: str) -> CatalogProduct | None:
        if not barcode:
            return None
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE store_id = ? AND barcode = ? ORDER BY rowid LIMIT 1",
                (store_id, barcode),
            )
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def find_by_name(self, store_id: str, name: str) -> CatalogProduct | None:
        if not name:
            return None
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM products
                WHERE store_id = ? AND lower(name) = lower(?)
                ORDER BY rowid LIMIT 1
                """,
                (store_id, name.strip()),
            )
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def list_all(self, store_id: str) -> list[CatalogProduct]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE store_id = ? ORDER BY rowid",
                (store_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def create(self, store_id: str, fields: dict[str, Any]) -> CatalogProduct:
        product = CatalogProduct(**{**fields, "store_id": store_id})
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO products (
                    id, store_id, name, sku, barcode, cost_price, selling_price,
                    category, is_active, initial_stock, is_unmatched,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product.id,
                    product.store_id,
                    product.name,
                    product.sku,
                    product.barcode,
                    product.cost_price,
                    product.selling_price,
                    product.category,
                    int(product.is_active),
                    product.initial_stock,
                    int(product.is_unmatched),
                    product.created_at.isoformat(),
                    product.updated_at.isoformat(),
                ),
            )
        logger.info(
            "product_created",
            product_id=product.id,
            store_id=store_id,
            name=product.name,
            is_unmatched=product.is_unmatched,
        )
        return product

    async def update_cost_price(self, product_id: str, cost_price: float) -> None:
        await self._update_column(product_id, "cost_price", cost_price)

    async def update_barcode(self, product_id: str, barcode: str) -> None:
        await self._update_column(product_id, "barcode", barcode)

    async def set_initial_stock(self, product_id: str, quantity: float) -> None:
        await self._update_column(product_id, "initial_stock", quantity)

    async def _update_column(self, product_id: str, column: str, value: Any) -> None:
        # column names come from the fixed set above, never from callers
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"UPDATE products SET {column} = ?, updated_at = ? WHERE id = ?",
                (value, datetime.utcnow().isoformat(), product_id),
            )
            if cursor.rowcount == 0:
                raise ProductNotFoundError(product_id)
        logger.debug("product_updated", product_id=product_id, column=column)

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> CatalogProduct:
        return CatalogProduct(
            id=row["id"],
            store_id=row["store_id"],
            name=row["name"],
            sku=row["sku"],
            barcode=row["barcode"],
            cost_price=row["cost_price"],
            selling_price=row["selling_price"],
            category=row["category"],
            is_active=bool(row["is_active"]),
            initial_stock=row["initial_stock"],
            is_unmatched=bool(row["is_unmatched"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )
