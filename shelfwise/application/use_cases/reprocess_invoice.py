"""Reprocess Invoice Use Case: re-run the pipeline on a stored document."""

from shelfwise.application.services import get_invoice_pipeline
from shelfwise.config import bind_log_context, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import Invoice, InvoiceStatus
from shelfwise.core.exceptions import (
    ExtractionError,
    InvoiceNotFoundError,
    InvoiceStateError,
)
from shelfwise.core.interfaces import IInvoiceStore
from shelfwise.core.services import InvoicePipeline

logger = get_logger(__name__)

REPROCESSABLE_STATUSES = (
    InvoiceStatus.PROCESSING,
    InvoiceStatus.PARSED,
    InvoiceStatus.NEEDS_REVIEW,
    InvoiceStatus.ERROR,
)


class ReprocessInvoiceUseCase:
    """Reset an unconfirmed invoice and run the full pipeline again."""

    def __init__(
        self,
        pipeline: InvoicePipeline | None = None,
        invoice_store: IInvoiceStore | None = None,
    ):
        self._pipeline = pipeline
        self._invoice_store = invoice_store

    async def _get_pipeline(self) -> InvoicePipeline:
        if self._pipeline is None:
            self._pipeline = await get_invoice_pipeline()
        return self._pipeline

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from shelfwise.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(self, invoice_id: str, ctx: AuthContext) -> Invoice:
        with bind_log_context(store_id=ctx.store_id, user_id=ctx.user_id, invoice_id=invoice_id):
            return await self._reprocess(invoice_id, ctx)

    async def _reprocess(self, invoice_id: str, ctx: AuthContext) -> Invoice:
        """
        Reprocess an invoice.

        Prior line items are discarded. A confirmed invoice is never touched.

        Raises:
            InvoiceNotFoundError: Unknown invoice or another store's invoice
            InvoiceStateError: The invoice is CONFIRMED
            ExtractionError: The rerun failed; the invoice is left in ERROR
        """
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(invoice_id)
        if invoice is None or invoice.store_id != ctx.store_id:
            raise InvoiceNotFoundError(invoice_id)

        if not await store.transition_status(
            invoice_id, REPROCESSABLE_STATUSES, InvoiceStatus.PROCESSING
        ):
            current = await store.get_invoice(invoice_id)
            status = current.status if current else invoice.status
            raise InvoiceStateError(invoice_id, status.value, "reprocess")

        logger.info(
            "reprocess_invoice_started",
            invoice_id=invoice_id,
            previous_status=invoice.status.value,
            previous_items=len(invoice.items),
        )

        invoice.status = InvoiceStatus.PROCESSING
        invoice.items = []
        invoice.parse_result = None
        invoice.error_message = None
        await store.save_invoice(invoice)

        pipeline = await self._get_pipeline()
        try:
            result = await pipeline.process_invoice(invoice.file_path, ctx)
        except ExtractionError as e:
            invoice.mark_error(e.message)
            await store.save_invoice(invoice)
            logger.warning("reprocess_invoice_failed", invoice_id=invoice_id, error=e.message)
            raise

        invoice.apply_result(result)
        await store.save_invoice(invoice)

        logger.info(
            "reprocess_invoice_complete",
            invoice_id=invoice_id,
            status=invoice.status.value,
            items=len(invoice.items),
        )
        return invoice
