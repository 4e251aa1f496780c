"""
Sales CSV ingestion.

Resolves POS export rows to catalog products, records one sale per
receipt and decrements tracked inventory without going below zero.
"""

import csv
import hashlib
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable
from uuid import uuid4

from shelfwise.config import InventorySettings, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.product import CatalogProduct
from shelfwise.core.entities.sale import Sale, SaleItem, SalesRow
from shelfwise.core.exceptions import InvalidStockValueError
from shelfwise.core.interfaces.catalog_store import ICatalogStore
from shelfwise.core.interfaces.inventory_ledger import IInventoryLedger
from shelfwise.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown Product"

_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%m/%d/%Y %H:%M", "%m/%d/%Y", "%d/%m/%Y")


@dataclass
class SalesIngestionSummary:
    """Outcome of one sales import."""

    rows_processed: int = 0
    sales_created: int = 0
    products_created: int = 0
    barcodes_backfilled: int = 0
    inventory_adjusted: int = 0
    sale_ids: list[str] = field(default_factory=list)


def parse_sales_csv(content: str | bytes) -> list[SalesRow]:
    """Parse a POS export (header row required) into SalesRow objects."""
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    reader = csv.DictReader(io.StringIO(content))
    return [SalesRow.model_validate(row) for row in reader]


def synthesize_barcode(store_id: str, name: str) -> str:
    """Stable placeholder barcode for a product first seen without one."""
    digest = hashlib.sha1(f"{store_id}:{name.strip().lower()}".encode()).hexdigest()
    return f"CSV-{digest[:12].upper()}"


def _parse_sold_at(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        logger.debug("sales_row_date_unparseable", value=value)
    return datetime.utcnow()


class SalesIngestionService:
    """
    POS rows to sales, products and inventory snapshots.

    Product resolution per line: exact barcode, then case-insensitive
    exact name (back-filling a missing barcode), then a new product
    flagged is_unmatched for later review.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore,
        ledger: IInventoryLedger,
        sales_store: ISalesStore,
        settings: InventorySettings | None = None,
    ) -> None:
        self._catalog_store = catalog_store
        self._ledger = ledger
        self._sales_store = sales_store
        self._settings = settings or InventorySettings()

    async def ingest_sales_rows(
        self,
        ctx: AuthContext,
        rows: Iterable[SalesRow | dict[str, Any]],
    ) -> SalesIngestionSummary:
        """
        Import sales rows for the caller's store.

        Raises:
            InvalidStockValueError: A row carries a negative quantity.
                The whole batch is rejected before any write.
        """
        parsed = [r if isinstance(r, SalesRow) else SalesRow.model_validate(r) for r in rows]

        for index, row in enumerate(parsed):
            if row.quantity is not None and row.quantity < 0:
                raise InvalidStockValueError("quantity", row.quantity, row=index)

        groups: dict[str, list[SalesRow]] = {}
        for row in parsed:
            key = row.receipt_id or f"GEN-{uuid4()}"
            groups.setdefault(key, []).append(row)

        summary = SalesIngestionSummary(rows_processed=len(parsed))
        logger.info(
            "sales_import_started",
            store_id=ctx.store_id,
            rows=len(parsed),
            receipts=len(groups),
        )

        for receipt_id, group in groups.items():
            lines: list[tuple[CatalogProduct, SaleItem]] = []
            for row in group:
                product = await self._resolve_product(ctx.store_id, row, summary)
                quantity = 1.0 if row.quantity is None else row.quantity
                unit_price = row.unit_price or 0.0
                lines.append(
                    (
                        product,
                        SaleItem(product_id=product.id, quantity=quantity, unit_price=unit_price),
                    )
                )

            sale = await self._sales_store.create_sale(
                Sale(
                    store_id=ctx.store_id,
                    receipt_id=receipt_id,
                    sold_at=_parse_sold_at(group[0].date),
                    items=[item for _, item in lines],
                )
            )
            summary.sales_created += 1
            summary.sale_ids.append(sale.id)

            for product, item in lines:
                if await self._decrement(ctx.store_id, product, item.quantity):
                    summary.inventory_adjusted += 1

        logger.info(
            "sales_import_complete",
            store_id=ctx.store_id,
            sales=summary.sales_created,
            products_created=summary.products_created,
            barcodes_backfilled=summary.barcodes_backfilled,
            inventory_adjusted=summary.inventory_adjusted,
        )
        return summary

    async def _resolve_product(
        self,
        store_id: str,
        row: SalesRow,
        summary: SalesIngestionSummary,
    ) -> CatalogProduct:
        if row.barcode:
            product = await self._catalog_store.find_by_barcode(store_id, row.barcode)
            if product is not None:
                return product

        name = row.product_name or UNKNOWN_PRODUCT_NAME
        product = await self._catalog_store.find_by_name(store_id, name)
        if product is not None:
            if row.barcode and not product.barcode:
                await self._catalog_store.update_barcode(product.id, row.barcode)
                product = product.model_copy(update={"barcode": row.barcode})
                summary.barcodes_backfilled += 1
            return product

        price = row.unit_price or 0.0
        product = await self._catalog_store.create(
            store_id,
            {
                "name": name,
                "barcode": row.barcode or synthesize_barcode(store_id, name),
                "selling_price": price,
                "cost_price": round(price * self._settings.estimated_cost_ratio, 2),
                "category": "Uncategorized",
                "is_unmatched": True,
            },
        )
        summary.products_created += 1
        logger.info(
            "sales_import_product_created",
            product_id=product.id,
            name=name,
            barcode=product.barcode,
        )
        return product

    async def _decrement(self, store_id: str, product: CatalogProduct, sold: float) -> bool:
        """Decrement tracked stock by the sold quantity; untracked products are left alone."""
        if not product.tracks_inventory:
            return False

        latest = await self._ledger.latest_snapshot(product.id)
        previous = latest.quantity_on_hand if latest else product.initial_stock
        new_quantity = max(0.0, previous - sold)

        if self._settings.csv_decrement_mode == "in_place" and latest is not None:
            await self._ledger.update_latest(product.id, new_quantity)
        else:
            await self._ledger.append_snapshot(store_id, product.id, new_quantity)

        logger.debug(
            "sales_import_stock_decremented",
            product_id=product.id,
            previous=previous,
            sold=sold,
            new_quantity=new_quantity,
        )
        return True
