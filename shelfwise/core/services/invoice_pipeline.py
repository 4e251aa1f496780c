"""
Invoice pipeline orchestrator.

Sequences text extraction, structured extraction, catalog matching,
pricing alerts, total validation and insight generation into a single
InvoiceParseResult. Only the two extraction steps may raise.
"""

from pathlib import Path

from shelfwise.config import ReconciliationThresholds, get_logger
from shelfwise.core.entities.context import AuthContext
from shelfwise.core.entities.insight import BusinessInsight
from shelfwise.core.entities.invoice import (
    Anomaly,
    ExtractedLineItem,
    InvoiceMetadata,
    InvoiceParseResult,
    MatchedLineItem,
    PricingAlert,
)
from shelfwise.core.interfaces.catalog_store import ICatalogStore
from shelfwise.core.interfaces.extraction import IStructuredExtractor, ITextExtractor
from shelfwise.core.services.catalog_matcher import CatalogMatcher
from shelfwise.core.services.insight_generator import InsightGenerator
from shelfwise.core.services.invoice_auditor import InvoiceAuditor

logger = get_logger(__name__)


def compute_confidence(
    ocr_confidence: float,
    items: list[MatchedLineItem],
    ocr_weight: float = 0.4,
    match_weight: float = 0.6,
) -> float:
    """
    Weighted blend of OCR confidence and mean match confidence (0 with no items).

    Returned unrounded; the review decision must see the exact value.
    """
    avg_match = sum(i.confidence for i in items) / len(items) if items else 0.0
    return ocr_confidence * ocr_weight + avg_match * match_weight


class InvoicePipeline:
    """
    Invoice processing orchestrator.

    Required interfaces for DI:
    - ITextExtractor: OCR adapter
    - IStructuredExtractor: language model adapter
    - ICatalogStore: catalog for matching and pricing alerts
    """

    def __init__(
        self,
        text_extractor: ITextExtractor,
        structured_extractor: IStructuredExtractor,
        catalog_store: ICatalogStore,
        thresholds: ReconciliationThresholds | None = None,
    ) -> None:
        self._text_extractor = text_extractor
        self._structured_extractor = structured_extractor
        self._catalog_store = catalog_store
        self._thresholds = thresholds or ReconciliationThresholds()

        self._matcher = CatalogMatcher(catalog_store, self._thresholds)
        self._auditor = InvoiceAuditor(catalog_store, self._thresholds)
        self._insights = InsightGenerator(self._thresholds)

    async def process_invoice(
        self,
        document_path: str | Path,
        ctx: AuthContext,
    ) -> InvoiceParseResult:
        """
        Run the full pipeline over one invoice document.

        Raises:
            ExtractionError: OCR failed or the language model was unreachable
        """
        t = self._thresholds
        logger.info(
            "invoice_pipeline_started",
            path=str(document_path),
            store_id=ctx.store_id,
            user_id=ctx.user_id,
        )

        text = await self._text_extractor.extract_text(document_path)
        extraction = await self._structured_extractor.parse_structured(text.text)

        # One catalog read serves both matching and pricing alerts
        catalog = await self._catalog_store.list_all(ctx.store_id)
        matched = self._matcher.match_items(extraction.items, catalog)
        alerts = self._auditor.detect_alerts(matched, {p.id: p for p in catalog})
        anomalies = self._auditor.validate_totals(extraction.metadata, matched)
        insights = self._insights.generate(matched, alerts)

        raw_confidence = compute_confidence(text.confidence, matched, t.ocr_weight, t.match_weight)
        needs_review = raw_confidence < t.review_threshold or bool(anomalies)
        confidence = round(raw_confidence, 4)

        result = InvoiceParseResult(
            metadata=extraction.metadata,
            line_items=matched,
            pricing_alerts=alerts,
            anomalies=anomalies,
            business_insights=insights,
            raw_text=text.text,
            ocr_confidence=text.confidence,
            confidence=confidence,
            needs_review=needs_review,
            low_confidence_lines=[
                index
                for index, item in enumerate(matched)
                if item.confidence < t.high_confidence_threshold
            ],
            extraction_errors=list(extraction.errors),
        )

        logger.info(
            "invoice_pipeline_complete",
            path=str(document_path),
            items=len(matched),
            unmatched=result.unmatched_count,
            alerts=len(alerts),
            anomalies=len(anomalies),
            confidence=confidence,
            needs_review=needs_review,
            degraded=extraction.malformed,
        )
        return result

    async def match_products_to_inventory(
        self,
        items: list[ExtractedLineItem],
        ctx: AuthContext,
    ) -> list[MatchedLineItem]:
        return await self._matcher.match_products_to_inventory(items, ctx)

    async def detect_pricing_alerts(
        self,
        items: list[MatchedLineItem],
        ctx: AuthContext,
    ) -> list[PricingAlert]:
        return await self._auditor.detect_pricing_alerts(items, ctx)

    def validate_invoice_totals(
        self,
        metadata: InvoiceMetadata,
        items: list[MatchedLineItem],
    ) -> list[Anomaly]:
        return self._auditor.validate_totals(metadata, items)

    def generate_business_insights(
        self,
        items: list[MatchedLineItem],
        alerts: list[PricingAlert],
    ) -> list[BusinessInsight]:
        return self._insights.generate(items, alerts)
