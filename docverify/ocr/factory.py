from docverify.config.settings import Settings
from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.example_adapter import ExampleTextExtractor
from docverify.ocr.tesseract_adapter import TesseractTextExtractor


class TextExtractorFactory:
    """Creates the configured OCR adapter."""

    ENGINES: tuple[str, ...] = ("tesseract", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.ocr_engine.lower()
        if engine == "example":
            return ExampleTextExtractor()
        if engine == "tesseract":
            return TesseractTextExtractor(
                timeout_seconds=settings.capability_timeout_seconds,
                tesseract_cmd=settings.tesseract_cmd,
            )
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
