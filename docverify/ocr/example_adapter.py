"""Example OCR adapter.

Use this module as a reference when implementing new OCR adapters.
Implement BaseTextExtractor and register the engine in TextExtractorFactory.
"""

from typing import ClassVar

from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.models import OcrResult


class ExampleTextExtractor(BaseTextExtractor):
    """Returns a fixed invoice transcript regardless of input.

    No OCR binary required. Useful for local development and tests.
    """

    DEFAULT_TEXT: ClassVar[str] = (
        "ACME Supplies Inc\n"
        "123 Market Street\n"
        "billing@acme-supplies.com (555) 123-4567\n"
        "Invoice # 10042\n"
        "Date: 3/15/2024 Due Date: 4/14/2024\n"
        "Quantity Price Total\n"
        "Total due: $1,250.00"
    )
    DEFAULT_CONFIDENCE: ClassVar[float] = 0.95

    def __init__(self, text: str | None = None, confidence: float | None = None) -> None:
        self._text = self.DEFAULT_TEXT if text is None else text
        self._confidence = self.DEFAULT_CONFIDENCE if confidence is None else confidence

    def extract(self, image_bytes: bytes, lang: str = "eng") -> OcrResult:
        _ = image_bytes, lang
        lines = [line for line in self._text.splitlines() if line.strip()]
        words = self._text.split()
        return OcrResult.from_words(
            self._text,
            [self._confidence] * len(words),
            lines=len(lines),
            blocks=1 if lines else 0,
        )
