"""Fixtures for use case tests."""

from collections.abc import Sequence
from unittest.mock import AsyncMock

import pytest

from shelfwise.core.entities import Invoice, InvoiceParseResult, InvoiceStatus
from shelfwise.core.exceptions import InvoiceNotFoundError
from shelfwise.core.interfaces import IInvoiceStore


class InMemoryInvoiceStore(IInvoiceStore):
    """Invoice store double with the same copy and compare-and-set semantics as SQLite."""

    def __init__(self) -> None:
        self.invoices: dict[str, Invoice] = {}

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        self.invoices[invoice.id] = invoice.model_copy(deep=True)
        return invoice

    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        invoice = self.invoices.get(invoice_id)
        return invoice.model_copy(deep=True) if invoice else None

    async def save_invoice(self, invoice: Invoice) -> Invoice:
        if invoice.id not in self.invoices:
            raise InvoiceNotFoundError(invoice.id)
        self.invoices[invoice.id] = invoice.model_copy(deep=True)
        return invoice

    async def transition_status(
        self,
        invoice_id: str,
        from_statuses: Sequence[InvoiceStatus],
        to_status: InvoiceStatus,
    ) -> bool:
        invoice = self.invoices.get(invoice_id)
        if invoice is None or invoice.status not in from_statuses:
            return False
        invoice.status = to_status
        return True

    async def list_invoices(self, store_id: str, limit: int = 100, offset: int = 0) -> list[Invoice]:
        rows = [i for i in self.invoices.values() if i.store_id == store_id]
        return rows[offset : offset + limit]


@pytest.fixture
def invoice_store() -> InMemoryInvoiceStore:
    return InMemoryInvoiceStore()


@pytest.fixture
def mock_pipeline():
    """Pipeline mock returning a clean result by default."""
    pipeline = AsyncMock()
    pipeline.process_invoice = AsyncMock(
        return_value=InvoiceParseResult(confidence=0.95, needs_review=False)
    )
    return pipeline


@pytest.fixture
def stored_invoice(invoice_store, make_matched):
    """Factory that stores an invoice in the given status for store-1."""

    async def _make(status: InvoiceStatus = InvoiceStatus.PARSED, **kwargs) -> Invoice:
        kwargs.setdefault("items", [make_matched("Cola", "p1", quantity=2, unit_cost=4.0)])
        invoice = Invoice(store_id="store-1", file_path="/tmp/inv.png", status=status, **kwargs)
        invoice.parse_result = InvoiceParseResult(line_items=list(invoice.items))
        await invoice_store.create_invoice(invoice)
        return invoice

    return _make
