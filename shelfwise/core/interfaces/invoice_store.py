"""Abstract interface for supplier invoice storage."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from shelfwise.core.entities.invoice import Invoice, InvoiceStatus


class IInvoiceStore(ABC):
    """Interface for invoice records and their line items."""

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Persist a new invoice."""
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        """Get invoice with its line items."""
        pass

    @abstractmethod
    async def save_invoice(self, invoice: Invoice) -> Invoice:
        """
        Update header, status and result, replacing all line items.

        Prior items are deleted before the new ones are written.
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        invoice_id: str,
        from_statuses: Sequence[InvoiceStatus],
        to_status: InvoiceStatus,
    ) -> bool:
        """
        Compare-and-set the status.

        Returns True only if the invoice was in one of from_statuses.
        """
        pass

    @abstractmethod
    async def list_invoices(
        self, store_id: str, limit: int = 100, offset: int = 0
    ) -> list[Invoice]:
        """List invoices for a store, newest first, without line items."""
        pass
