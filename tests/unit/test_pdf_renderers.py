import io
from unittest.mock import patch

import pytest
from PIL import Image

from docverify.pdf.exceptions import PdfRenderError
from docverify.pdf.factory import PdfRendererFactory
from docverify.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docverify.pdf.pymupdf_adapter import PyMuPdfAdapter


def _make_settings(pdf_engine: str):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with the PDF fields."""
    with patch("docverify.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        settings.pdf_render_dpi = 200
        return settings


@pytest.mark.parametrize("adapter_cls", [PyMuPdfAdapter, PdfPlumberAdapter])
class TestPdfRenderers:
    def test_renders_first_page_to_png(self, adapter_cls: type, sample_pdf_bytes: bytes) -> None:
        png = adapter_cls(dpi=72).render_first_page(sample_pdf_bytes)
        assert png.startswith(b"\x89PNG")
        with Image.open(io.BytesIO(png)) as image:
            # US letter at 72 dpi
            assert image.width == pytest.approx(612, abs=2)
            assert image.height == pytest.approx(792, abs=2)

    def test_dpi_scales_output(self, adapter_cls: type, sample_pdf_bytes: bytes) -> None:
        png = adapter_cls(dpi=144).render_first_page(sample_pdf_bytes)
        with Image.open(io.BytesIO(png)) as image:
            assert image.width == pytest.approx(1224, abs=4)

    def test_invalid_bytes_raise(self, adapter_cls: type) -> None:
        with pytest.raises(PdfRenderError):
            adapter_cls().render_first_page(b"%PDF-1.4 this is not a pdf")


class TestPdfRendererFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        assert isinstance(PdfRendererFactory.create(_make_settings("pdfplumber")), PdfPlumberAdapter)

    def test_creates_pymupdf_adapter(self) -> None:
        assert isinstance(PdfRendererFactory.create(_make_settings("pymupdf")), PyMuPdfAdapter)

    def test_is_case_insensitive(self) -> None:
        assert isinstance(PdfRendererFactory.create(_make_settings("PyMuPDF")), PyMuPdfAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfRendererFactory.create(_make_settings("unknown"))

    def test_binds_configured_dpi(self) -> None:
        settings = _make_settings("pymupdf")
        settings.pdf_render_dpi = 300
        assert PdfRendererFactory.create(settings).dpi == 300


class TestBasePdfRenderer:
    def test_rejects_non_positive_dpi(self) -> None:
        with pytest.raises(ValueError, match="dpi"):
            PyMuPdfAdapter(dpi=0)
