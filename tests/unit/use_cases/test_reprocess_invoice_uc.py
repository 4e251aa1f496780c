"""Unit tests for ReprocessInvoiceUseCase."""

import pytest

from shelfwise.application.use_cases.reprocess_invoice import ReprocessInvoiceUseCase
from shelfwise.core.entities import AuthContext, InvoiceParseResult, InvoiceStatus
from shelfwise.core.exceptions import ExtractionError, InvoiceNotFoundError, InvoiceStateError


@pytest.fixture
def use_case(mock_pipeline, invoice_store) -> ReprocessInvoiceUseCase:
    return ReprocessInvoiceUseCase(pipeline=mock_pipeline, invoice_store=invoice_store)


@pytest.mark.asyncio
class TestReprocessInvoice:
    async def test_reruns_and_replaces_items(self, use_case, invoice_store, stored_invoice, mock_pipeline, ctx, make_matched):
        invoice = await stored_invoice(InvoiceStatus.NEEDS_REVIEW)
        mock_pipeline.process_invoice.return_value = InvoiceParseResult(
            line_items=[make_matched("Chips", "p2")],
            needs_review=False,
        )

        result = await use_case.execute(invoice.id, ctx)

        assert result.status == InvoiceStatus.PARSED
        assert [i.description for i in result.items] == ["Chips"]
        mock_pipeline.process_invoice.assert_awaited_once_with("/tmp/inv.png", ctx)
        stored = await invoice_store.get_invoice(invoice.id)
        assert [i.description for i in stored.items] == ["Chips"]

    async def test_error_invoice_can_be_retried(self, use_case, stored_invoice, ctx):
        invoice = await stored_invoice(InvoiceStatus.ERROR, items=[])

        result = await use_case.execute(invoice.id, ctx)

        assert result.status == InvoiceStatus.PARSED
        assert result.error_message is None

    async def test_failed_rerun_leaves_error(self, use_case, invoice_store, stored_invoice, mock_pipeline, ctx):
        invoice = await stored_invoice(InvoiceStatus.PARSED)
        mock_pipeline.process_invoice.side_effect = ExtractionError("/tmp/inv.png", "blurry")

        with pytest.raises(ExtractionError):
            await use_case.execute(invoice.id, ctx)

        stored = await invoice_store.get_invoice(invoice.id)
        assert stored.status == InvoiceStatus.ERROR
        assert stored.items == []
        assert stored.parse_result is None

    async def test_confirmed_invoice_rejected(self, use_case, invoice_store, stored_invoice, mock_pipeline, ctx):
        invoice = await stored_invoice(InvoiceStatus.CONFIRMED)

        with pytest.raises(InvoiceStateError) as exc_info:
            await use_case.execute(invoice.id, ctx)

        assert exc_info.value.details["status"] == "CONFIRMED"
        mock_pipeline.process_invoice.assert_not_called()
        stored = await invoice_store.get_invoice(invoice.id)
        assert len(stored.items) == 1

    async def test_other_store_invoice_not_found(self, use_case, stored_invoice):
        invoice = await stored_invoice()

        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute(invoice.id, AuthContext(user_id="u", store_id="store-2"))

    async def test_unknown_invoice(self, use_case, ctx):
        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute("missing", ctx)
