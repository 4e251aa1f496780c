"""
Upload Invoice Use Case.

Stores the uploaded document, creates the invoice record and runs the
reconciliation pipeline over it.
"""

from dataclasses import dataclass
from pathlib import Path

from shelfwise.application.dto.requests import UploadInvoiceRequest
from shelfwise.application.services import get_invoice_pipeline
from shelfwise.config import bind_log_context, get_logger, get_settings
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.invoice import Invoice
from shelfwise.core.exceptions import (
    ExtractionError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from shelfwise.core.interfaces import IInvoiceStore
from shelfwise.core.services import InvoicePipeline

logger = get_logger(__name__)


@dataclass
class UploadResult:
    """Result of invoice upload."""

    invoice: Invoice

    @property
    def needs_review(self) -> bool:
        return self.invoice.parse_result is not None and self.invoice.parse_result.needs_review


class UploadInvoiceUseCase:
    """
    Use case for uploading and processing a supplier invoice.

    Flow:
    1. Validate extension and size
    2. Save the document under the upload directory
    3. Create the invoice in PROCESSING
    4. Run the pipeline
    5. Persist the result as PARSED or NEEDS_REVIEW (ERROR on extraction failure)
    """

    def __init__(
        self,
        pipeline: InvoicePipeline | None = None,
        invoice_store: IInvoiceStore | None = None,
        upload_dir: Path | None = None,
    ):
        self._pipeline = pipeline
        self._invoice_store = invoice_store
        self._upload_dir = upload_dir

    async def _get_pipeline(self) -> InvoicePipeline:
        if self._pipeline is None:
            self._pipeline = await get_invoice_pipeline()
        return self._pipeline

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from shelfwise.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    def _validate(self, file_content: bytes, filename: str) -> str:
        settings = get_settings().upload
        extension = Path(filename).suffix.lower()
        if extension not in settings.allowed_extensions:
            raise UnsupportedFileTypeError(filename, extension, settings.allowed_extensions)
        if len(file_content) > settings.max_upload_size:
            raise FileTooLargeError(filename, len(file_content), settings.max_upload_size)
        return extension

    async def execute(
        self,
        file_content: bytes,
        request: UploadInvoiceRequest,
        ctx: AuthContext,
    ) -> UploadResult:
        with bind_log_context(store_id=ctx.store_id, user_id=ctx.user_id):
            return await self._upload(file_content, request, ctx)

    async def _upload(
        self,
        file_content: bytes,
        request: UploadInvoiceRequest,
        ctx: AuthContext,
    ) -> UploadResult:
        """
        Execute invoice upload use case.

        Raises:
            UnsupportedFileTypeError: Extension not allowed
            FileTooLargeError: Content exceeds the upload limit
            ExtractionError: OCR or the language model failed; the
                invoice is left in ERROR
        """
        filename = Path(request.filename).name
        extension = self._validate(file_content, filename)

        upload_dir = self._upload_dir or get_settings().storage.upload_dir
        upload_dir.mkdir(parents=True, exist_ok=True)

        invoice = Invoice(store_id=ctx.store_id, file_path="", original_filename=filename)
        file_path = upload_dir / f"{invoice.id}{extension}"
        file_path.write_bytes(file_content)
        invoice.file_path = str(file_path)

        logger.info(
            "upload_invoice_started",
            invoice_id=invoice.id,
            filename=filename,
            size=len(file_content),
            store_id=ctx.store_id,
        )

        store = await self._get_invoice_store()
        await store.create_invoice(invoice)

        pipeline = await self._get_pipeline()
        try:
            result = await pipeline.process_invoice(file_path, ctx)
        except ExtractionError as e:
            invoice.mark_error(e.message)
            await store.save_invoice(invoice)
            logger.warning("upload_invoice_failed", invoice_id=invoice.id, error=e.message)
            raise

        invoice.apply_result(result)
        await store.save_invoice(invoice)

        logger.info(
            "upload_invoice_complete",
            invoice_id=invoice.id,
            status=invoice.status.value,
            items=len(invoice.items),
            confidence=result.confidence,
        )
        return UploadResult(invoice=invoice)
