"""
Confirm Invoice Use Case.

Moves an invoice to CONFIRMED and applies its lines to inventory exactly
once. The status change is a compare-and-set in the store, so a repeated
or concurrent confirmation fails without touching inventory.
"""

from dataclasses import dataclass
from datetime import datetime

from shelfwise.application.dto.requests import ConfirmInvoiceRequest
from shelfwise.application.services import get_inventory_reconciler
from shelfwise.config import bind_log_context, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import (
    CONFIRMABLE_STATUSES,
    InventoryUpdate,
    Invoice,
    InvoiceParseResult,
    InvoiceStatus,
)
from shelfwise.core.exceptions import (
    ConfirmationConflictError,
    InvoiceNotFoundError,
    InvoiceStateError,
)
from shelfwise.core.interfaces import IInvoiceStore
from shelfwise.core.services import InventoryReconciler

logger = get_logger(__name__)


@dataclass
class ConfirmResult:
    """Result of confirming an invoice."""

    invoice: Invoice
    updates: list[InventoryUpdate]


class ConfirmInvoiceUseCase:
    """Confirm a parsed invoice and apply it to the catalog and ledger."""

    def __init__(
        self,
        reconciler: InventoryReconciler | None = None,
        invoice_store: IInvoiceStore | None = None,
    ):
        self._reconciler = reconciler
        self._invoice_store = invoice_store

    async def _get_reconciler(self) -> InventoryReconciler:
        if self._reconciler is None:
            self._reconciler = await get_inventory_reconciler()
        return self._reconciler

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from shelfwise.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(self, request: ConfirmInvoiceRequest, ctx: AuthContext) -> ConfirmResult:
        with bind_log_context(
            store_id=ctx.store_id, user_id=ctx.user_id, invoice_id=request.invoice_id
        ):
            return await self._confirm(request, ctx)

    async def _confirm(self, request: ConfirmInvoiceRequest, ctx: AuthContext) -> ConfirmResult:
        """
        Confirm an invoice.

        Raises:
            InvoiceNotFoundError: Unknown invoice or another store's invoice
            ConfirmationConflictError: Already confirmed
            InvoiceStateError: Not in PARSED or NEEDS_REVIEW
            ProductNotFoundError: A line references a missing product;
                the invoice keeps its previous status
        """
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(request.invoice_id)
        if invoice is None or invoice.store_id != ctx.store_id:
            raise InvoiceNotFoundError(request.invoice_id)

        self._check_confirmable(invoice.id, invoice.status)
        previous_status = invoice.status
        items = request.items if request.items is not None else list(invoice.items)

        if not await store.transition_status(
            invoice.id, CONFIRMABLE_STATUSES, InvoiceStatus.CONFIRMED
        ):
            current = await store.get_invoice(invoice.id)
            self._check_confirmable(invoice.id, current.status if current else previous_status)
            raise ConfirmationConflictError(invoice.id)

        logger.info(
            "confirm_invoice_started",
            invoice_id=invoice.id,
            items=len(items),
            edited=request.items is not None,
        )

        reconciler = await self._get_reconciler()
        try:
            updates = await reconciler.apply_inventory_updates(invoice.id, items, ctx)
        except Exception as e:
            await store.transition_status(invoice.id, (InvoiceStatus.CONFIRMED,), previous_status)
            logger.error(
                "confirm_invoice_failed",
                invoice_id=invoice.id,
                error=str(e),
                restored_status=previous_status.value,
            )
            raise

        result = invoice.parse_result or InvoiceParseResult()
        invoice.parse_result = result.model_copy(
            update={"line_items": items, "inventory_updates": updates}
        )
        invoice.items = items
        invoice.status = InvoiceStatus.CONFIRMED
        invoice.confirmed_at = datetime.utcnow()
        await store.save_invoice(invoice)

        logger.info(
            "confirm_invoice_complete",
            invoice_id=invoice.id,
            applied=len(updates),
        )
        return ConfirmResult(invoice=invoice, updates=updates)

    @staticmethod
    def _check_confirmable(invoice_id: str, status: InvoiceStatus) -> None:
        if status == InvoiceStatus.CONFIRMED:
            raise ConfirmationConflictError(invoice_id)
        if status not in CONFIRMABLE_STATUSES:
            raise InvoiceStateError(invoice_id, status.value, "confirm")
