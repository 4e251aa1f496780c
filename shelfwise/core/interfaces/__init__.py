"""Abstract interfaces for infrastructure implementations."""

from shelfwise.core.interfaces.catalog_store import ICatalogStore
from shelfwise.core.interfaces.extraction import (
    IOCREngine,
    IStructuredExtractor,
    ITextExtractor,
    OCRResult,
    StructuredExtraction,
    TextExtractionResult,
)
from shelfwise.core.interfaces.inventory_ledger import IInventoryLedger
from shelfwise.core.interfaces.invoice_store import IInvoiceStore
from shelfwise.core.interfaces.llm import (
    HealthStatus,
    ILLMProvider,
    LLMProvider,
    LLMResponse,
)
from shelfwise.core.interfaces.sales_store import ISalesStore

__all__ = [
    # Storage
    "ICatalogStore",
    "IInventoryLedger",
    "IInvoiceStore",
    "ISalesStore",
    # Extraction
    "IOCREngine",
    "ITextExtractor",
    "IStructuredExtractor",
    "OCRResult",
    "TextExtractionResult",
    "StructuredExtraction",
    # LLM
    "ILLMProvider",
    "LLMProvider",
    "LLMResponse",
    "HealthStatus",
]
