import pymupdf

from docverify.pdf.base import BasePdfRenderer
from docverify.pdf.exceptions import PdfRenderError


class PyMuPdfAdapter(BasePdfRenderer):
    """Rasterizes with PyMuPDF's pixmap renderer."""

    def render_first_page(self, pdf_bytes: bytes) -> bytes:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise PdfRenderError("PDF has no pages")
                pixmap = doc[0].get_pixmap(dpi=self.dpi)
                return pixmap.tobytes("png")
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError(f"pymupdf rendering failed: {exc}") from exc
