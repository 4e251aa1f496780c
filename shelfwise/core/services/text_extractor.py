"""
Text extraction adapter.

Wraps an injected OCR engine and normalizes its native confidence to
[0, 1]. Any failure to read the document is fatal for the pipeline run.
"""

from pathlib import Path

from shelfwise.config import get_logger
from shelfwise.core.exceptions import ExtractionError
from shelfwise.core.interfaces.extraction import (
    IOCREngine,
    ITextExtractor,
    TextExtractionResult,
)

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp", ".pdf")


class TextExtractor(ITextExtractor):
    """OCR-backed text extraction with confidence normalization."""

    def __init__(self, ocr_engine: IOCREngine, language: str = "eng") -> None:
        self._engine = ocr_engine
        self._language = language

    async def extract_text(self, document_path: str | Path) -> TextExtractionResult:
        path = Path(document_path)
        if not path.exists():
            raise ExtractionError(str(path), "file not found")
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            raise ExtractionError(str(path), f"unsupported file type '{path.suffix}'")

        logger.info("text_extraction_started", path=str(path), language=self._language)

        try:
            result = await self._engine.recognize(path, self._language)
        except ExtractionError:
            raise
        except Exception as e:
            logger.error("text_extraction_failed", path=str(path), error=str(e))
            raise ExtractionError(str(path), str(e)) from e

        confidence = min(1.0, max(0.0, result.confidence_percent / 100))

        logger.info(
            "text_extraction_complete",
            path=str(path),
            chars=len(result.text),
            pages=result.pages,
            confidence=round(confidence, 4),
        )
        return TextExtractionResult(text=result.text, confidence=confidence)
