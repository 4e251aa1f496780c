"""OCR infrastructure implementations."""

from shelfwise.infrastructure.ocr.tesseract import TesseractOCREngine, get_ocr_engine

__all__ = [
    "TesseractOCREngine",
    "get_ocr_engine",
]
