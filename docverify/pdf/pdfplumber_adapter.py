import io

import pdfplumber

from docverify.pdf.base import BasePdfRenderer
from docverify.pdf.exceptions import PdfRenderError


class PdfPlumberAdapter(BasePdfRenderer):
    """Rasterizes with pdfplumber's page images (pypdfium2 underneath)."""

    def render_first_page(self, pdf_bytes: bytes) -> bytes:
        buf = io.BytesIO()
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not pdf.pages:
                    raise PdfRenderError("PDF has no pages")
                page_image = pdf.pages[0].to_image(resolution=self.dpi)
                page_image.original.save(buf, format="PNG")
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError(f"pdfplumber rendering failed: {exc}") from exc
        return buf.getvalue()
