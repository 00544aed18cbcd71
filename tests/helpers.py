"""Test doubles and builders shared by unit and integration tests."""

import io
import threading
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from PIL import Image, ImageDraw

from docverify.classification.base import BaseDocumentClassifier
from docverify.imaging.base import BaseImageAnalyzer
from docverify.imaging.models import ImageMetadata, ImageQualityResult, Resolution
from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.models import OcrResult
from docverify.verification.models import (
    ClassificationResult,
    ConsistencyResult,
    DocumentType,
    FraudResult,
    StructureResult,
    VerificationReport,
)

INVOICE_TEXT = (
    "Northwind Traders LLC\n"
    "42 Harbor Street, Springfield\n"
    "billing@northwind-traders.com (555) 201-3344\n"
    "Invoice # 20931\n"
    "Invoice Date: 3/15/2024\n"
    "Due Date: 4/14/2024\n"
    "Description Quantity Price Total\n"
    "Consulting services 10 $125.00 $1,250.00\n"
    "Total due: $1,250.00"
)


class FakeClock:
    """Mutable clock for deterministic time-based tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class StubImageAnalyzer(BaseImageAnalyzer):
    def __init__(
        self,
        result: ImageQualityResult | None = None,
        metadata: ImageMetadata | None = None,
    ) -> None:
        self.result = result or high_quality_image()
        self.metadata = metadata or ImageMetadata(format="png", has_exif=True)

    def analyze(self, image_bytes: bytes) -> ImageQualityResult:
        return self.result

    def inspect(self, image_bytes: bytes) -> ImageMetadata:
        return self.metadata


class StubTextExtractor(BaseTextExtractor):
    def __init__(self, result: OcrResult | None = None) -> None:
        self.result = result or ocr_result(INVOICE_TEXT)
        self.calls: list[tuple[bytes, str]] = []

    def extract(self, image_bytes: bytes, lang: str = "eng") -> OcrResult:
        self.calls.append((image_bytes, lang))
        return self.result


class StallingTextExtractor(BaseTextExtractor):
    """Blocks until released, simulating a hung OCR engine."""

    def __init__(self) -> None:
        self.release = threading.Event()

    def extract(self, image_bytes: bytes, lang: str = "eng") -> OcrResult:
        self.release.wait(timeout=5)
        return ocr_result(INVOICE_TEXT)


class StubClassifier(BaseDocumentClassifier):
    def __init__(self, predicted: DocumentType = DocumentType.INVOICE, confidence: float = 0.9) -> None:
        rest = (1.0 - confidence) / (len(DocumentType) - 1)
        self.distribution = {t: (confidence if t == predicted else rest) for t in DocumentType}

    def classify(self, features: Sequence[float]) -> dict[DocumentType, float]:
        return dict(self.distribution)


def high_quality_image() -> ImageQualityResult:
    return ImageQualityResult(
        resolution=Resolution(width=1200, height=1600),
        sharpness=0.9,
        brightness=0.6,
        contrast=0.8,
        color_balance_ok=True,
        file_size=250_000,
        format="png",
        score=1.0,
    )


def ocr_result(text: str, confidence: float = 0.95) -> OcrResult:
    words = text.split()
    lines = [line for line in text.splitlines() if line.strip()]
    return OcrResult.from_words(text, [confidence] * len(words), lines=len(lines), blocks=1)


def make_png(
    width: int = 1200,
    height: int = 1600,
    mode: str = "RGB",
    dpi: tuple[int, int] | None = None,
    stripe: int = 20,
    seed: int = 0,
) -> bytes:
    """White page with black bars: sharp, mid-brightness, full contrast."""
    background = (255, 255, 255, 255) if mode == "RGBA" else "white"
    image = Image.new(mode, (width, height), background)
    draw = ImageDraw.Draw(image)
    for top in range(0, height, stripe * 2):
        draw.rectangle([0, top, width - 1, top + stripe - 1], fill="black")
    draw.point((seed % width, 0), fill="gray")
    buf = io.BytesIO()
    kwargs = {"dpi": dpi} if dpi else {}
    image.save(buf, format="PNG", **kwargs)
    return buf.getvalue()


def make_report(
    *,
    confidence: float = 0.9,
    fraud_score: float = 0.0,
    authentic: bool = True,
    processing_time_ms: int = 50,
    document_type: DocumentType = DocumentType.INVOICE,
) -> VerificationReport:
    return VerificationReport(
        document_id="0" * 32,
        timestamp=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
        document_type=document_type,
        image_quality=high_quality_image(),
        ocr=ocr_result(INVOICE_TEXT),
        structure=StructureResult(score=1.0),
        fraud=FraudResult(score=fraud_score),
        classification=ClassificationResult(
            predicted_type=document_type,
            expected_type=document_type,
            match=True,
            confidence=0.9,
        ),
        consistency=ConsistencyResult(score=1.0),
        confidence=confidence,
        fraud_score=fraud_score,
        authentic=authentic,
        processing_time_ms=processing_time_ms,
    )
