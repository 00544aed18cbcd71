from abc import ABC, abstractmethod

DEFAULT_RENDER_DPI = 200


class BasePdfRenderer(ABC):
    """Contract for all PDF rasterization adapters.

    A renderer is bound to one output resolution so every page it produces
    is comparable by the image-quality stage.
    """

    def __init__(self, dpi: int = DEFAULT_RENDER_DPI) -> None:
        if dpi <= 0:
            raise ValueError("dpi must be positive")
        self.dpi = dpi

    @abstractmethod
    def render_first_page(self, pdf_bytes: bytes) -> bytes:
        """Rasterize the first page of a PDF.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PNG image bytes of the first page at ``self.dpi``.

        Raises:
            PdfRenderError: if the PDF cannot be opened or has no pages.
        """
