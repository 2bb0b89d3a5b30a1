"""
Test the Tesseract OCR provider

pytesseract.image_to_string is replaced where a recognition result is needed,
so these tests do not require the tesseract binary.
"""
import asyncio
import io
import time

import pytest
import pytesseract
from PIL import Image
from pypdf import PageObject, PdfWriter

from inbody_tracker.domain.models import ExtractionResult, ExtractionStatus
from inbody_tracker.infrastructure.ocr.tesseract_provider import TesseractOCRProvider

pytestmark = pytest.mark.integration

REPORT_TEXT = "Weight: 78.4 kg\nSkeletal Muscle Mass: 34.2\nPBF 22.5"


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buf, format="PNG")
    return buf.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def test_image_is_recognized_and_parsed(monkeypatch):
    monkeypatch.setattr(pytesseract, "image_to_string", lambda image, lang=None: REPORT_TEXT)
    provider = TesseractOCRProvider()
    progress = []

    async def main():
        return await provider.extract_inbody_data(_png_bytes(), progress.append)

    result = asyncio.run(main())

    assert result.status is ExtractionStatus.COMPLETE
    assert result.weight_kg == 78.4
    assert progress[0] == 0
    assert progress[-1] == 100


def test_image_path_payload(monkeypatch, tmp_path):
    monkeypatch.setattr(pytesseract, "image_to_string", lambda image, lang=None: "Weight 80 kg")
    path = tmp_path / "report.png"
    path.write_bytes(_png_bytes())

    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(path))

    assert result.weight_kg == 80.0


def test_corrupt_image_gives_empty_result():
    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(b"not an image"))

    assert result == ExtractionResult.empty()


def test_engine_error_gives_empty_result(monkeypatch):
    def boom(image, lang=None):
        raise pytesseract.TesseractError(1, "engine crashed")

    monkeypatch.setattr(pytesseract, "image_to_string", boom)

    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(_png_bytes()))

    assert result == ExtractionResult.empty()


def test_timeout_gives_empty_result(monkeypatch):
    def slow(image, lang=None):
        time.sleep(0.5)
        return REPORT_TEXT

    monkeypatch.setattr(pytesseract, "image_to_string", slow)

    result = asyncio.run(TesseractOCRProvider(timeout=0.05).extract_inbody_data(_png_bytes()))

    assert result == ExtractionResult.empty()


def test_missing_file_gives_empty_result(tmp_path):
    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(tmp_path / "nope.jpg"))

    assert result.status is ExtractionStatus.FAILED


def test_pdf_without_text_layer_gives_empty_result():
    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(_blank_pdf_bytes()))

    assert result == ExtractionResult.empty()


def test_pdf_text_layer_is_parsed(monkeypatch):
    monkeypatch.setattr(PageObject, "extract_text", lambda self, *args, **kwargs: REPORT_TEXT)

    result = asyncio.run(TesseractOCRProvider().extract_inbody_data(_blank_pdf_bytes()))

    assert result.skeletal_muscle_kg == 34.2
    assert result.body_fat_percentage == 22.5
