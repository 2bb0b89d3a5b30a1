"""
infrastructure.ocr.tesseract_provider - Tesseract-based InBody report reader.

Implements the OCRProvider port. Image payloads are recognized with
Tesseract via pytesseract; PDF payloads are read from their embedded text
layer with pypdf. Recognition is blocking, so it runs in the default thread
pool and is bounded by a caller-side timeout.

Any failure (unreadable file, PDF without text, missing tesseract binary,
engine error, timeout) is logged and degraded to ExtractionResult.empty():
the caller always gets a structured result and falls back to manual entry.

Setup:
    apt install tesseract-ocr      # or brew install tesseract
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Callable, Optional

import pytesseract
from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from inbody_tracker.domain.exceptions import ExtractionFailure
from inbody_tracker.domain.extraction import parse_inbody_text
from inbody_tracker.domain.models import ExtractionResult
from inbody_tracker.domain.ports import ProgressCallback, ReportPayload

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF"


class TesseractOCRProvider:
    """Read InBody reports with Tesseract (images) or pypdf (PDF text layer).

    Implements OCRProvider (structural typing, no explicit inheritance).
    """

    name = "Tesseract"

    def __init__(
        self,
        language: str = "eng",
        timeout: float = 60.0,
        tesseract_cmd: str = "",
    ):
        self._language = language
        self._timeout = timeout
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    async def extract_inbody_data(
        self,
        payload: ReportPayload,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult:
        """Recognize the report and extract the three metrics.

        Never raises for engine failures; returns an empty result instead.
        """
        loop = asyncio.get_running_loop()
        report = _threadsafe_progress(loop, on_progress)

        try:
            text = await asyncio.wait_for(
                loop.run_in_executor(None, self._recognize, payload, report),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Tesseract OCR timed out after %.1fs", self._timeout)
            return ExtractionResult.empty()
        except ExtractionFailure as e:
            logger.warning("Could not read InBody report: %s", e)
            return ExtractionResult.empty()
        except Exception as e:
            logger.warning("Tesseract OCR error (%s): %s", type(e).__name__, e)
            return ExtractionResult.empty()

        result = parse_inbody_text(text)
        logger.info(
            "OCR extracted %d/3 field(s) from %d characters",
            result.found_fields, len(text),
        )
        return result

    # ------------------------------------------------------------------
    # Blocking work (runs in thread pool)
    # ------------------------------------------------------------------

    def _recognize(self, payload: ReportPayload, report: Callable[[int], None]) -> str:
        data = _read_payload(payload)
        report(0)
        if data.startswith(_PDF_MAGIC):
            text = self._read_pdf_text(data, report)
        else:
            text = self._read_image_text(data, report)
        report(100)
        return text

    def _read_image_text(self, data: bytes, report: Callable[[int], None]) -> str:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ExtractionFailure(f"unsupported or corrupt image: {e}") from e
        report(10)

        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        try:
            return pytesseract.image_to_string(image, lang=self._language)
        except pytesseract.TesseractNotFoundError as e:
            raise ExtractionFailure("tesseract binary not found") from e
        except pytesseract.TesseractError as e:
            raise ExtractionFailure(f"tesseract failed: {e}") from e

    @staticmethod
    def _read_pdf_text(data: bytes, report: Callable[[int], None]) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = list(reader.pages)
        except PdfReadError as e:
            raise ExtractionFailure(f"corrupt PDF: {e}") from e

        chunks = []
        for i, page in enumerate(pages, start=1):
            chunks.append(page.extract_text() or "")
            report(int(i / len(pages) * 90))

        text = "\n".join(chunks)
        if not text.strip():
            raise ExtractionFailure("PDF has no text layer")
        return text


def _read_payload(payload: ReportPayload) -> bytes:
    if isinstance(payload, bytes):
        return payload
    path = Path(payload)
    if not path.exists():
        raise ExtractionFailure(f"report file not found: {payload}")
    return path.read_bytes()


def _threadsafe_progress(
    loop: asyncio.AbstractEventLoop,
    on_progress: Optional[ProgressCallback],
) -> Callable[[int], None]:
    """Deliver progress from the worker thread back on the event loop."""
    if on_progress is None:
        return lambda pct: None

    def report(pct: int) -> None:
        loop.call_soon_threadsafe(on_progress, max(0, min(100, pct)))

    return report
