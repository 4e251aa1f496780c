"""
Service factory functions for dependency injection.

Wires infrastructure implementations to core services. Use cases import
from here; the core layer never does.
"""

from shelfwise.config import get_settings
from shelfwise.core.services import (
    InventoryReconciler,
    InvoicePipeline,
    SalesIngestionService,
    StructuredExtractor,
    TextExtractor,
)

# Singleton service instances
_invoice_pipeline: InvoicePipeline | None = None
_inventory_reconciler: InventoryReconciler | None = None
_sales_ingestion_service: SalesIngestionService | None = None


async def get_invoice_pipeline() -> InvoicePipeline:
    """Get or create the invoice pipeline wired to Tesseract, Ollama and SQLite."""
    global _invoice_pipeline
    if _invoice_pipeline is not None:
        return _invoice_pipeline

    # Lazy import infrastructure to avoid circular imports
    from shelfwise.infrastructure.llm import get_llm_provider
    from shelfwise.infrastructure.ocr import get_ocr_engine
    from shelfwise.infrastructure.storage.sqlite import get_catalog_store

    settings = get_settings()
    _invoice_pipeline = InvoicePipeline(
        text_extractor=TextExtractor(get_ocr_engine(), language=settings.ocr.language),
        structured_extractor=StructuredExtractor(
            get_llm_provider(),
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
        ),
        catalog_store=await get_catalog_store(),
        thresholds=settings.thresholds,
    )
    return _invoice_pipeline


async def get_inventory_reconciler() -> InventoryReconciler:
    """Get or create the inventory reconciler."""
    global _inventory_reconciler
    if _inventory_reconciler is None:
        from shelfwise.infrastructure.storage.sqlite import (
            get_catalog_store,
            get_inventory_ledger,
        )

        _inventory_reconciler = InventoryReconciler(
            catalog_store=await get_catalog_store(),
            ledger=await get_inventory_ledger(),
        )
    return _inventory_reconciler


async def get_sales_ingestion_service() -> SalesIngestionService:
    """Get or create the sales ingestion service."""
    global _sales_ingestion_service
    if _sales_ingestion_service is None:
        from shelfwise.infrastructure.storage.sqlite import (
            get_catalog_store,
            get_inventory_ledger,
            get_sales_store,
        )

        _sales_ingestion_service = SalesIngestionService(
            catalog_store=await get_catalog_store(),
            ledger=await get_inventory_ledger(),
            sales_store=await get_sales_store(),
            settings=get_settings().inventory,
        )
    return _sales_ingestion_service


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _invoice_pipeline
    global _inventory_reconciler
    global _sales_ingestion_service

    _invoice_pipeline = None
    _inventory_reconciler = None
    _sales_ingestion_service = None


__all__ = [
    "get_invoice_pipeline",
    "get_inventory_reconciler",
    "get_sales_ingestion_service",
    "reset_services",
]
