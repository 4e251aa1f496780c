"""
Capability interfaces for invoice text and data extraction.

The pipeline depends on these contracts only, so any OCR engine or
language model (or a human-in-the-loop fallback) can be substituted.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from shelfwise.core.entities.invoice import ExtractedLineItem, InvoiceMetadata


@dataclass
class OCRResult:
    """Raw OCR engine output."""

    text: str
    confidence_percent: float  # engine native scale, 0-100
    pages: int = 1


@dataclass
class TextExtractionResult:
    """OCR text with confidence normalized to [0, 1]."""

    text: str
    confidence: float


@dataclass
class StructuredExtraction:
    """
    Typed invoice data parsed from raw text.

    A malformed model response yields all-null metadata and no items, with
    the reasons listed in errors. Item-level rejections are also recorded
    in errors while valid items are kept.
    """

    metadata: InvoiceMetadata = field(default_factory=InvoiceMetadata)
    items: list[ExtractedLineItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    malformed: bool = False
    raw_response: str = ""


class IOCREngine(ABC):
    """OCR engine: image or PDF in, text and native confidence out."""

    @abstractmethod
    async def recognize(self, path: Path, language: str) -> OCRResult:
        """
        Recognize text in a document.

        Raises:
            Exception: Any engine failure; the text extractor wraps it
        """
        pass


class ITextExtractor(ABC):
    """Text extraction adapter."""

    @abstractmethod
    async def extract_text(self, document_path: str | Path) -> TextExtractionResult:
        """
        Extract text from a document.

        Raises:
            ExtractionError: Document unreadable or engine failure
        """
        pass


class IStructuredExtractor(ABC):
    """Structured extraction adapter."""

    @abstractmethod
    async def parse_structured(self, raw_text: str) -> StructuredExtraction:
        """
        Parse invoice metadata and line items from raw text.

        Malformed model output degrades to an empty extraction.

        Raises:
            ExtractionError: The language model could not be reached
        """
        pass
