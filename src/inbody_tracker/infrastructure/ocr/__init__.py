from inbody_tracker.infrastructure.ocr.tesseract_provider import TesseractOCRProvider

__all__ = ["TesseractOCRProvider"]
