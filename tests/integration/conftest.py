import io
import shutil
from collections.abc import Iterator

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docverify.cache.memory import InMemoryFraudPatternCache
from docverify.config.settings import Settings
from docverify.verification.engine import VerificationEngine, build_engine
from helpers import FakeClock


def _test_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"ocr_engine": "example", "capability_timeout_seconds": 20}
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg, arg-type]


@pytest.fixture()
def example_engine(clock: FakeClock) -> Iterator[VerificationEngine]:
    """Real Pillow analyzer and keyword classifier, canned OCR text."""
    with build_engine(_test_settings(), cache=InMemoryFraudPatternCache(), clock=clock) as engine:
        yield engine


@pytest.fixture(params=["pymupdf", "pdfplumber"])
def pdf_engine(request: pytest.FixtureRequest, clock: FakeClock) -> Iterator[VerificationEngine]:
    settings = _test_settings(pdf_engine=request.param, pdf_render_dpi=200)
    with build_engine(settings, cache=InMemoryFraudPatternCache(), clock=clock) as engine:
        yield engine


@pytest.fixture()
def tesseract_engine(clock: FakeClock) -> Iterator[VerificationEngine]:
    if shutil.which("tesseract") is None:
        pytest.skip("tesseract binary not available")
    settings = _test_settings(ocr_engine="tesseract", pdf_render_dpi=300)
    with build_engine(settings, cache=InMemoryFraudPatternCache(), clock=clock) as engine:
        yield engine


@pytest.fixture()
def large_text_pdf_bytes() -> bytes:
    """Invoice page with text large enough for reliable OCR."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setFont("Helvetica", 28)
    c.drawString(72, 700, "INVOICE 10042")
    c.drawString(72, 640, "Due Date 4/14/2024")
    c.drawString(72, 580, "Total $1250.00")
    c.save()
    return buf.getvalue()
