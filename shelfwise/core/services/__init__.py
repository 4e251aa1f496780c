"""
Core business logic services.

Layer-pure services that depend only on:
- shelfwise/core/entities/*
- shelfwise/core/interfaces/*
- shelfwise/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from shelfwise.core.services.catalog_matcher import CatalogMatcher, MatchCandidate
from shelfwise.core.services.insight_generator import InsightGenerator
from shelfwise.core.services.invoice_auditor import InvoiceAuditor
from shelfwise.core.services.invoice_pipeline import InvoicePipeline, compute_confidence
from shelfwise.core.services.reconciliation import InventoryReconciler
from shelfwise.core.services.sales_ingestion import (
    SalesIngestionService,
    SalesIngestionSummary,
    parse_sales_csv,
    synthesize_barcode,
)
from shelfwise.core.services.structured_extractor import (
    StructuredExtractor,
    decode_payload,
    render_payload,
)
from shelfwise.core.services.text_extractor import SUPPORTED_EXTENSIONS, TextExtractor

__all__ = [
    # Extraction
    "TextExtractor",
    "SUPPORTED_EXTENSIONS",
    "StructuredExtractor",
    "decode_payload",
    "render_payload",
    # Matching and auditing
    "CatalogMatcher",
    "MatchCandidate",
    "InvoiceAuditor",
    "InsightGenerator",
    # Orchestration
    "InvoicePipeline",
    "compute_confidence",
    # Inventory
    "InventoryReconciler",
    "SalesIngestionService",
    "SalesIngestionSummary",
    "parse_sales_csv",
    "synthesize_barcode",
]
