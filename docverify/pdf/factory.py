from docverify.config.settings import Settings
from docverify.logging.logger import Log
from docverify.pdf.base import BasePdfRenderer
from docverify.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docverify.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfRendererFactory:
    """Creates the rasterizer named by ``pdf_engine``, bound to ``pdf_render_dpi``."""

    ADAPTERS: dict[str, type[BasePdfRenderer]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRenderer:
        engine = settings.pdf_engine.strip().lower()
        try:
            adapter_cls = cls.ADAPTERS[engine]
        except KeyError:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            ) from None
        Log.debug("PDF renderer selected", engine=engine, dpi=settings.pdf_render_dpi)
        return adapter_cls(dpi=settings.pdf_render_dpi)
