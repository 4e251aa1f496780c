"""
OCR engine using Tesseract.

Images are read with Pillow; PDFs are rasterised page by page with
PyMuPDF. Tesseract calls block, so they run in a worker thread.
"""

import asyncio
from pathlib import Path

import fitz  # PyMuPDF
import pytesseract
from PIL import Image
from pytesseract import Output

from shelfwise.config import get_logger, get_settings
from shelfwise.core.interfaces.extraction import IOCREngine, OCRResult

logger = get_logger(__name__)


def _page_confidence(data: dict) -> float | None:
    """Mean word confidence for one page, or None when no words were found."""
    scores = []
    for conf, word in zip(data.get("conf", []), data.get("text", [])):
        try:
            value = float(conf)
        except (TypeError, ValueError):
            continue
        if value > -1 and str(word).strip():
            scores.append(value)
    if not scores:
        return None
    return sum(scores) / len(scores)


class TesseractOCREngine(IOCREngine):
    """Tesseract OCR engine (native confidence scale 0-100)."""

    def __init__(self, tesseract_cmd: str | None = None, pdf_dpi: int | None = None) -> None:
        settings = get_settings()
        cmd = tesseract_cmd or settings.ocr.tesseract_cmd
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd
        self.pdf_dpi = pdf_dpi or settings.ocr.pdf_dpi

    async def recognize(self, path: Path, language: str) -> OCRResult:
        return await asyncio.to_thread(self._recognize_sync, Path(path), language)

    def _recognize_sync(self, path: Path, language: str) -> OCRResult:
        if path.suffix.lower() == ".pdf":
            images = self._rasterize_pdf(path)
        else:
            with Image.open(path) as image:
                image.load()
                images = [image.copy()]

        texts: list[str] = []
        confidences: list[float] = []
        for image in images:
            texts.append(pytesseract.image_to_string(image, lang=language))
            data = pytesseract.image_to_data(image, lang=language, output_type=Output.DICT)
            confidence = _page_confidence(data)
            if confidence is not None:
                confidences.append(confidence)

        mean_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.debug(
            "tesseract_recognize_complete",
            path=str(path),
            pages=len(images),
            confidence=round(mean_confidence, 2),
        )
        return OCRResult(
            text="\n".join(t.strip() for t in texts if t.strip()),
            confidence_percent=mean_confidence,
            pages=len(images),
        )

    def _rasterize_pdf(self, path: Path) -> list[Image.Image]:
        images: list[Image.Image] = []
        doc = fitz.open(str(path))
        try:
            for page in doc:
                pix = page.get_pixmap(dpi=self.pdf_dpi)
                images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
        finally:
            doc.close()
        return images


# Singleton
_ocr_engine: TesseractOCREngine | None = None


def get_ocr_engine() -> TesseractOCREngine:
    """Get or create the OCR engine singleton."""
    global _ocr_engine
    if _ocr_engine is None:
        _ocr_engine = TesseractOCREngine()
    return _ocr_engine
