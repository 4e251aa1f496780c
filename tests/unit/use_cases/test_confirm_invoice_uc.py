"""Unit tests for ConfirmInvoiceUseCase."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import structlog

from shelfwise.application.dto.requests import ConfirmInvoiceRequest
from shelfwise.application.use_cases.confirm_invoice import ConfirmInvoiceUseCase
from shelfwise.core.entities import InventoryUpdate, InvoiceStatus
from shelfwise.core.exceptions import (
    ConfirmationConflictError,
    InvoiceNotFoundError,
    InvoiceStateError,
    ProductNotFoundError,
)


@pytest.fixture
def mock_reconciler():
    reconciler = AsyncMock()

    async def _apply(invoice_id, items, ctx):
        await asyncio.sleep(0)
        return [
            InventoryUpdate(
                product_id=item.matched_product_id,
                quantity_added=item.quantity,
                new_cost=item.unit_cost,
                new_quantity=item.quantity,
            )
            for item in items
            if item.matched_product_id
        ]

    reconciler.apply_inventory_updates = AsyncMock(side_effect=_apply)
    return reconciler


@pytest.fixture
def use_case(mock_reconciler, invoice_store) -> ConfirmInvoiceUseCase:
    return ConfirmInvoiceUseCase(reconciler=mock_reconciler, invoice_store=invoice_store)


@pytest.mark.asyncio
class TestConfirmInvoice:
    async def test_confirms_and_applies(self, use_case, invoice_store, stored_invoice, mock_reconciler, ctx):
        invoice = await stored_invoice(InvoiceStatus.NEEDS_REVIEW)

        result = await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        assert result.invoice.status == InvoiceStatus.CONFIRMED
        assert result.invoice.confirmed_at is not None
        assert [u.product_id for u in result.updates] == ["p1"]
        stored = await invoice_store.get_invoice(invoice.id)
        assert stored.status == InvoiceStatus.CONFIRMED
        assert stored.parse_result.inventory_updates[0].quantity_added == 2.0
        mock_reconciler.apply_inventory_updates.assert_awaited_once()

    async def test_store_and_invoice_bound_while_applying(self, use_case, stored_invoice, mock_reconciler, ctx):
        invoice = await stored_invoice(InvoiceStatus.PARSED)
        seen = {}

        async def _apply(invoice_id, items, ctx):
            seen.update(structlog.contextvars.get_contextvars())
            return []

        mock_reconciler.apply_inventory_updates.side_effect = _apply

        await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        assert seen == {"store_id": "store-1", "user_id": "user-1", "invoice_id": invoice.id}
        assert "invoice_id" not in structlog.contextvars.get_contextvars()

    async def test_edited_items_replace_stored(self, use_case, invoice_store, stored_invoice, mock_reconciler, ctx, make_matched):
        invoice = await stored_invoice()
        edited = [make_matched("Cola", "p1", quantity=5, unit_cost=3.0), make_matched("Gum")]

        result = await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id, items=edited), ctx)

        applied_items = mock_reconciler.apply_inventory_updates.call_args.args[1]
        assert applied_items == edited
        assert result.updates[0].quantity_added == 5.0
        stored = await invoice_store.get_invoice(invoice.id)
        assert [i.description for i in stored.items] == ["Cola", "Gum"]

    async def test_second_confirm_conflicts(self, use_case, stored_invoice, mock_reconciler, ctx):
        invoice = await stored_invoice()
        await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        with pytest.raises(ConfirmationConflictError):
            await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        assert mock_reconciler.apply_inventory_updates.await_count == 1

    async def test_concurrent_confirms_apply_once(self, use_case, stored_invoice, mock_reconciler, ctx):
        invoice = await stored_invoice()
        request = ConfirmInvoiceRequest(invoice_id=invoice.id)

        results = await asyncio.gather(
            use_case.execute(request, ctx),
            use_case.execute(request, ctx),
            return_exceptions=True,
        )

        assert sum(isinstance(r, ConfirmationConflictError) for r in results) == 1
        assert mock_reconciler.apply_inventory_updates.await_count == 1

    @pytest.mark.parametrize("status", [InvoiceStatus.PROCESSING, InvoiceStatus.ERROR])
    async def test_unconfirmable_status(self, use_case, stored_invoice, mock_reconciler, ctx, status):
        invoice = await stored_invoice(status)

        with pytest.raises(InvoiceStateError) as exc_info:
            await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        assert not isinstance(exc_info.value, ConfirmationConflictError)
        mock_reconciler.apply_inventory_updates.assert_not_called()

    async def test_apply_failure_restores_status(self, use_case, invoice_store, stored_invoice, mock_reconciler, ctx):
        invoice = await stored_invoice(InvoiceStatus.NEEDS_REVIEW)
        mock_reconciler.apply_inventory_updates.side_effect = ProductNotFoundError("p1", "store-1")

        with pytest.raises(ProductNotFoundError):
            await use_case.execute(ConfirmInvoiceRequest(invoice_id=invoice.id), ctx)

        stored = await invoice_store.get_invoice(invoice.id)
        assert stored.status == InvoiceStatus.NEEDS_REVIEW
        assert stored.confirmed_at is None

    async def test_unknown_invoice(self, use_case, ctx):
        with pytest.raises(InvoiceNotFoundError):
            await use_case.execute(ConfirmInvoiceRequest(invoice_id="missing"), ctx)
