"""SQLite implementation of invoice storage."""

from collections.abc import Sequence
from datetime import date, datetime

import aiosqlite

from shelfwise.config import get_logger
from shelfwise.core.entities.invoice import (
    Invoice,
    InvoiceParseResult,
    InvoiceStatus,
    MatchedLineItem,
)
from shelfwise.core.exceptions import InvoiceNotFoundError
from shelfwise.core.interfaces.invoice_store import IInvoiceStore
from shelfwise.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """Invoices with their line items; the parse result is stored as JSON."""

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO invoices (
                    id, store_id, status, file_path, original_filename,
                    supplier_name, invoice_number, invoice_date, total_amount,
                    parse_result_json, error_message, confirmed_at,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.id,
                    invoice.store_id,
                    invoice.status.value,
                    invoice.file_path,
                    invoice.original_filename,
                    *self._header_values(invoice),
                    invoice.created_at.isoformat(),
                    invoice.updated_at.isoformat(),
                ),
            )
            await self._insert_items(conn, invoice)

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            store_id=invoice.store_id,
            status=invoice.status.value,
        )
        return invoice

    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
            row = await cursor.fetchone()
            if row is None:
                return None

            cursor = await conn.execute(
                "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY line_number",
                (invoice_id,),
            )
            item_rows = await cursor.fetchall()

        invoice = self._row_to_invoice(row)
        invoice.items = [self._row_to_item(r) for r in item_rows]
        return invoice

    async def save_invoice(self, invoice: Invoice) -> Invoice:
        invoice.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET
                    status = ?,
                    supplier_name = ?,
                    invoice_number = ?,
                    invoice_date = ?,
                    total_amount = ?,
                    parse_result_json = ?,
                    error_message = ?,
                    confirmed_at = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    invoice.status.value,
                    *self._header_values(invoice),
                    invoice.updated_at.isoformat(),
                    invoice.id,
                ),
            )
            if cursor.rowcount == 0:
                raise InvoiceNotFoundError(invoice.id)

            await conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice.id,))
            await self._insert_items(conn, invoice)

        logger.debug(
            "invoice_saved",
            invoice_id=invoice.id,
            status=invoice.status.value,
            items=len(invoice.items),
        )
        return invoice

    async def transition_status(
        self,
        invoice_id: str,
        from_statuses: Sequence[InvoiceStatus],
        to_status: InvoiceStatus,
    ) -> bool:
        placeholders = ", ".join("?" for _ in from_statuses)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"""
                UPDATE invoices SET status = ?, updated_at = ?
                WHERE id = ? AND status IN ({placeholders})
                """,
                (
                    to_status.value,
                    datetime.utcnow().isoformat(),
                    invoice_id,
                    *(s.value for s in from_statuses),
                ),
            )
            changed = cursor.rowcount == 1

        logger.debug(
            "invoice_status_transition",
            invoice_id=invoice_id,
            to_status=to_status.value,
            changed=changed,
        )
        return changed

    async def list_invoices(
        self, store_id: str, limit: int = 100, offset: int = 0
    ) -> list[Invoice]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM invoices WHERE store_id = ?
                ORDER BY created_at DESC LIMIT ? OFFSET ?
                """,
                (store_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_invoice(row, with_result=False) for row in rows]

    @staticmethod
    def _header_values(invoice: Invoice) -> tuple:
        return (
            invoice.supplier_name,
            invoice.invoice_number,
            invoice.invoice_date.isoformat() if invoice.invoice_date else None,
            invoice.total_amount,
            invoice.parse_result.model_dump_json() if invoice.parse_result else None,
            invoice.error_message,
            invoice.confirmed_at.isoformat() if invoice.confirmed_at else None,
        )

    @staticmethod
    async def _insert_items(conn: aiosqlite.Connection, invoice: Invoice) -> None:
        await conn.executemany(
            """
            INSERT INTO invoice_items (
                invoice_id, line_number, description, sku, upc, quantity,
                unit_cost, line_total, matched_product_id, matched_product_name,
                confidence
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    invoice.id,
                    line_number,
                    item.description,
                    item.sku,
                    item.upc,
                    item.quantity,
                    item.unit_cost,
                    item.line_total,
                    item.matched_product_id,
                    item.matched_product_name,
                    item.confidence,
                )
                for line_number, item in enumerate(invoice.items, start=1)
            ],
        )

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row, with_result: bool = True) -> Invoice:
        parse_result = None
        if with_result and row["parse_result_json"]:
            parse_result = InvoiceParseResult.model_validate_json(row["parse_result_json"])

        return Invoice(
            id=row["id"],
            store_id=row["store_id"],
            status=InvoiceStatus(row["status"]),
            file_path=row["file_path"],
            original_filename=row["original_filename"],
            supplier_name=row["supplier_name"],
            invoice_number=row["invoice_number"],
            invoice_date=date.fromisoformat(row["invoice_date"]) if row["invoice_date"] else None,
            total_amount=row["total_amount"],
            parse_result=parse_result,
            error_message=row["error_message"],
            confirmed_at=(
                datetime.fromisoformat(row["confirmed_at"]) if row["confirmed_at"] else None
            ),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> MatchedLineItem:
        return MatchedLineItem(
            description=row["description"],
            sku=row["sku"],
            upc=row["upc"],
            quantity=row["quantity"],
            unit_cost=row["unit_cost"],
            line_total=row["line_total"],
            matched_product_id=row["matched_product_id"],
            matched_product_name=row["matched_product_name"],
            confidence=row["confidence"],
        )
