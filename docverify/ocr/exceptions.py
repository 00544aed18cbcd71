class TextExtractionError(Exception):
    """Raised when OCR text extraction fails."""
