"""Unit tests for the OCR text extraction adapter."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from shelfwise.core.exceptions import ExtractionError
from shelfwise.core.interfaces import OCRResult
from shelfwise.core.services.text_extractor import TextExtractor


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "invoice.png"
    path.write_bytes(b"\x89PNG fake")
    return path


def _engine(result=None, error=None) -> AsyncMock:
    engine = AsyncMock()
    engine.recognize = AsyncMock(return_value=result, side_effect=error)
    return engine


@pytest.mark.asyncio
class TestTextExtractor:
    async def test_normalizes_confidence(self, image_file):
        engine = _engine(OCRResult(text="INVOICE", confidence_percent=85.0))

        result = await TextExtractor(engine, language="eng").extract_text(image_file)

        assert result.text == "INVOICE"
        assert result.confidence == pytest.approx(0.85)
        engine.recognize.assert_awaited_once_with(image_file, "eng")

    async def test_clamps_confidence(self, image_file):
        engine = _engine(OCRResult(text="x", confidence_percent=140.0))

        result = await TextExtractor(engine).extract_text(str(image_file))

        assert result.confidence == 1.0

    async def test_missing_file(self, tmp_path):
        with pytest.raises(ExtractionError, match="file not found"):
            await TextExtractor(_engine()).extract_text(tmp_path / "nope.png")

    async def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "invoice.docx"
        path.write_bytes(b"x")

        with pytest.raises(ExtractionError, match="unsupported file type"):
            await TextExtractor(_engine()).extract_text(path)

    async def test_engine_crash_is_wrapped(self, image_file):
        engine = _engine(error=RuntimeError("tesseract exploded"))

        with pytest.raises(ExtractionError) as exc_info:
            await TextExtractor(engine).extract_text(image_file)

        assert exc_info.value.details["stage"] == "ocr"
        assert "tesseract exploded" in exc_info.value.message
