"""Unit tests for the invoice pipeline orchestrator."""

from unittest.mock import AsyncMock

import pytest

from shelfwise.config import ReconciliationThresholds
from shelfwise.core.entities import AlertType, InsightType, InvoiceMetadata
from shelfwise.core.exceptions import ExtractionError
from shelfwise.core.interfaces import StructuredExtraction, TextExtractionResult
from shelfwise.core.services.invoice_pipeline import InvoicePipeline, compute_confidence


def _text_extractor(text: str = "INVOICE", confidence: float = 0.95) -> AsyncMock:
    extractor = AsyncMock()
    extractor.extract_text = AsyncMock(
        return_value=TextExtractionResult(text=text, confidence=confidence)
    )
    return extractor


def _structured(extraction: StructuredExtraction) -> AsyncMock:
    extractor = AsyncMock()
    extractor.parse_structured = AsyncMock(return_value=extraction)
    return extractor


class TestComputeConfidence:
    def test_weighted_blend(self, make_matched):
        items = [make_matched("A", "p1", confidence=1.0), make_matched("B", "p2", confidence=0.5)]

        assert compute_confidence(0.8, items) == pytest.approx(0.77)

    def test_no_items_uses_zero_match_average(self):
        assert compute_confidence(0.9, []) == pytest.approx(0.36)

    def test_custom_weights(self, make_matched):
        items = [make_matched("A", "p1", confidence=0.5)]

        assert compute_confidence(1.0, items, ocr_weight=0.5, match_weight=0.5) == 0.75

    def test_value_is_not_rounded(self, make_matched):
        items = [make_matched("A", "p1", confidence=0.99)]

        value = compute_confidence(0.764925, items)

        assert value == pytest.approx(0.89997)
        assert value < 0.9


@pytest.mark.asyncio
class TestProcessInvoice:
    async def test_full_run(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [
            make_product("p1", "Cola 12pk", barcode="111", cost_price=10.0, selling_price=20.0),
        ]
        extraction = StructuredExtraction(
            metadata=InvoiceMetadata(supplier_name="Acme", subtotal=32.0),
            items=[
                make_item("Cola 12pk", upc="111", quantity=2, unit_cost=10.0, line_total=20.0),
                make_item("Mystery Snack", quantity=4, unit_cost=3.0, line_total=12.0),
            ],
        )
        pipeline = InvoicePipeline(_text_extractor(), _structured(extraction), catalog_store)

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        catalog_store.list_all.assert_awaited_once_with("store-1")
        assert [i.matched_product_id for i in result.line_items] == ["p1", None]
        assert result.line_items[0].confidence == 0.99
        assert [a.type for a in result.pricing_alerts] == [AlertType.NEW_PRODUCT]
        assert result.anomalies == []
        assert [i.type for i in result.business_insights] == [InsightType.REORDER_SUGGESTION]
        assert result.ocr_confidence == 0.95
        assert result.confidence == pytest.approx(0.95 * 0.4 + 0.495 * 0.6, abs=1e-4)
        assert result.needs_review is True
        assert result.low_confidence_lines == [1]
        assert result.metadata.supplier_name == "Acme"

    async def test_confident_clean_invoice_skips_review(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", barcode="111")]
        extraction = StructuredExtraction(
            items=[make_item("Cola", upc="111", quantity=1, unit_cost=0.0)],
        )
        pipeline = InvoicePipeline(_text_extractor(confidence=0.8), _structured(extraction), catalog_store)

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        # 0.8 * 0.4 + 0.99 * 0.6 = 0.914
        assert result.confidence == pytest.approx(0.914)
        assert result.needs_review is False
        assert result.low_confidence_lines == []

    async def test_just_below_review_threshold_needs_review(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", barcode="111")]
        extraction = StructuredExtraction(
            items=[make_item("Cola", upc="111", quantity=1, unit_cost=0.0)],
        )
        pipeline = InvoicePipeline(
            _text_extractor(confidence=0.764925), _structured(extraction), catalog_store
        )

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        # 0.764925 * 0.4 + 0.99 * 0.6 = 0.89997, stored rounded
        assert result.confidence == pytest.approx(0.9)
        assert result.anomalies == []
        assert result.needs_review is True

    async def test_exactly_at_review_threshold_skips_review(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", barcode="111")]
        extraction = StructuredExtraction(
            items=[make_item("Cola", upc="111", quantity=1, unit_cost=0.0)],
        )
        thresholds = ReconciliationThresholds(ocr_weight=0.0, match_weight=1.0, review_threshold=0.99)
        pipeline = InvoicePipeline(
            _text_extractor(confidence=0.5), _structured(extraction), catalog_store, thresholds
        )

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        assert result.confidence == 0.99
        assert result.needs_review is False

    async def test_just_above_review_threshold_skips_review(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", barcode="111")]
        extraction = StructuredExtraction(
            items=[make_item("Cola", upc="111", quantity=1, unit_cost=0.0)],
        )
        pipeline = InvoicePipeline(
            _text_extractor(confidence=0.766), _structured(extraction), catalog_store
        )

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        # 0.766 * 0.4 + 0.99 * 0.6 = 0.9004
        assert result.confidence == pytest.approx(0.9004)
        assert result.needs_review is False

    async def test_anomaly_forces_review(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", barcode="111")]
        extraction = StructuredExtraction(
            metadata=InvoiceMetadata(subtotal=50.0),
            items=[make_item("Cola", upc="111", quantity=1, unit_cost=0.0, line_total=10.0)],
        )
        pipeline = InvoicePipeline(_text_extractor(confidence=1.0), _structured(extraction), catalog_store)

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        assert result.confidence >= 0.9
        assert len(result.anomalies) == 1
        assert result.needs_review is True

    async def test_malformed_extraction_degrades(self, ctx, catalog_store):
        extraction = StructuredExtraction(errors=["Invalid JSON syntax: x"], malformed=True)
        pipeline = InvoicePipeline(_text_extractor(), _structured(extraction), catalog_store)

        result = await pipeline.process_invoice("/tmp/inv.png", ctx)

        assert result.line_items == []
        assert result.needs_review is True
        assert result.extraction_errors == ["Invalid JSON syntax: x"]

    async def test_ocr_failure_propagates(self, ctx, catalog_store):
        text_extractor = AsyncMock()
        text_extractor.extract_text = AsyncMock(side_effect=ExtractionError("/tmp/x.png", "boom"))
        structured = _structured(StructuredExtraction())
        pipeline = InvoicePipeline(text_extractor, structured, catalog_store)

        with pytest.raises(ExtractionError):
            await pipeline.process_invoice("/tmp/x.png", ctx)

        structured.parse_structured.assert_not_called()
        catalog_store.list_all.assert_not_called()


@pytest.mark.asyncio
class TestFacade:
    async def test_match_products_to_inventory(self, ctx, catalog_store, make_product, make_item):
        catalog_store.list_all.return_value = [make_product("p1", "Cola", sku="C1")]
        pipeline = InvoicePipeline(_text_extractor(), _structured(StructuredExtraction()), catalog_store)

        [matched] = await pipeline.match_products_to_inventory([make_item("x", sku="c1")], ctx)

        assert matched.matched_product_id == "p1"
        assert matched.confidence == 0.95


def test_validate_invoice_totals_facade(catalog_store, make_matched):
    pipeline = InvoicePipeline(_text_extractor(), _structured(StructuredExtraction()), catalog_store)

    anomalies = pipeline.validate_invoice_totals(
        InvoiceMetadata(subtotal=10.0), [make_matched("A", line_total=10.0)]
    )

    assert anomalies == []


def test_generate_business_insights_facade(catalog_store, make_matched):
    pipeline = InvoicePipeline(_text_extractor(), _structured(StructuredExtraction()), catalog_store)

    [insight] = pipeline.generate_business_insights([make_matched("A")], [])

    assert insight.type == InsightType.REORDER_SUGGESTION
