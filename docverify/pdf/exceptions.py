class PdfRenderError(Exception):
    """Raised when a PDF page cannot be rasterized."""
