"""Unit tests for the Tesseract OCR engine with pytesseract patched."""

from pathlib import Path
from unittest.mock import patch

import fitz
import pytest
from PIL import Image

from shelfwise.infrastructure.ocr.tesseract import TesseractOCREngine, _page_confidence


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "invoice.png"
    Image.new("RGB", (40, 20), "white").save(path)
    return path


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    path = tmp_path / "invoice.pdf"
    doc = fitz.open()
    doc.new_page(width=72, height=72)
    doc.new_page(width=72, height=72)
    doc.save(str(path))
    doc.close()
    return path


class TestPageConfidence:
    def test_ignores_blank_and_negative(self):
        data = {"conf": ["-1", "90", "80", 70], "text": ["", "ACME", "Cola", " "]}

        assert _page_confidence(data) == 85.0

    def test_no_words(self):
        assert _page_confidence({"conf": ["-1"], "text": [""]}) is None


@pytest.mark.asyncio
class TestTesseractOCREngine:
    async def test_image(self, png_file):
        with patch("shelfwise.infrastructure.ocr.tesseract.pytesseract") as tess:
            tess.image_to_string.return_value = "ACME FOODS\n"
            tess.image_to_data.return_value = {"conf": ["92", "88"], "text": ["ACME", "FOODS"]}

            result = await TesseractOCREngine(pdf_dpi=72).recognize(png_file, "eng")

        assert result.text == "ACME FOODS"
        assert result.confidence_percent == 90.0
        assert result.pages == 1
        assert tess.image_to_string.call_args.kwargs == {"lang": "eng"}

    async def test_pdf_pages(self, pdf_file):
        with patch("shelfwise.infrastructure.ocr.tesseract.pytesseract") as tess:
            tess.image_to_string.side_effect = ["page one", "page two"]
            tess.image_to_data.side_effect = [
                {"conf": ["80"], "text": ["one"]},
                {"conf": ["-1"], "text": [""]},
            ]

            result = await TesseractOCREngine(pdf_dpi=72).recognize(pdf_file, "eng")

        assert result.pages == 2
        assert result.text == "page one\npage two"
        assert result.confidence_percent == 80.0

    async def test_blank_image(self, png_file):
        with patch("shelfwise.infrastructure.ocr.tesseract.pytesseract") as tess:
            tess.image_to_string.return_value = ""
            tess.image_to_data.return_value = {"conf": ["-1"], "text": [""]}

            result = await TesseractOCREngine(pdf_dpi=72).recognize(png_file, "eng")

        assert result.text == ""
        assert result.confidence_percent == 0.0
