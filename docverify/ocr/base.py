from abc import ABC, abstractmethod

from docverify.ocr.models import OcrResult


class BaseTextExtractor(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def extract(self, image_bytes: bytes, lang: str = "eng") -> OcrResult:
        """Extract text and per-word confidence from a raster image.

        Args:
            image_bytes: Raster image content (JPEG or PNG).
            lang: OCR language hint, e.g. 'eng' or 'eng+deu'.

        Returns:
            OcrResult with text, counts and derived text quality.

        Raises:
            TextExtractionError: if extraction fails for any reason.
        """
