from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from docverify.cache.memory import InMemoryFraudPatternCache
from docverify.classification.exceptions import ClassificationError
from docverify.imaging.exceptions import ImageAnalysisError
from docverify.imaging.models import ImageMetadata
from docverify.ocr.exceptions import TextExtractionError
from docverify.verification.capabilities import CapabilityRunner
from docverify.verification.consistency import MetadataConsistencyChecker
from docverify.verification.document_loader import PreparedDocument
from docverify.verification.fraud import FLAG_MANIPULATED, FraudHeuristics
from docverify.verification.models import DocumentMetadata, DocumentType, VerificationRequest
from docverify.verification.pipeline import VerificationContext
from docverify.verification.steps import (
    ClassificationStep,
    FraudHeuristicsStep,
    ImageQualityStep,
    MetadataConsistencyStep,
    StructureStep,
    TextExtractionStep,
)
from docverify.verification.structure import StructureMatcher
from helpers import (
    INVOICE_TEXT,
    FakeClock,
    StallingTextExtractor,
    StubClassifier,
    StubImageAnalyzer,
    StubTextExtractor,
    ocr_result,
)


@pytest.fixture()
def runner() -> Iterator[CapabilityRunner]:
    r = CapabilityRunner(timeout_seconds=0.05)
    yield r
    r.shutdown()


def _context(
    fmt: str = "png",
    metadata: DocumentMetadata | None = None,
    text: str | None = None,
) -> VerificationContext:
    request = VerificationRequest(
        document_bytes=b"raw-bytes",
        document_type=DocumentType.INVOICE,
        metadata=metadata or DocumentMetadata(),
    )
    document = PreparedDocument(raw_bytes=b"raw-bytes", image_bytes=b"image-bytes", format=fmt)
    context = VerificationContext(request=request, document=document)
    if text is not None:
        context.ocr = ocr_result(text)
    return context


class TestImageQualityStep:
    def test_stores_analysis(self, runner: CapabilityRunner) -> None:
        analyzer = StubImageAnalyzer()
        context = ImageQualityStep(analyzer, runner).run(_context())
        assert context.image_quality is analyzer.result
        assert context.degraded == []

    def test_failure_yields_neutral_score(self, runner: CapabilityRunner) -> None:
        analyzer = MagicMock()
        analyzer.analyze.side_effect = ImageAnalysisError("Cannot decode image")
        context = ImageQualityStep(analyzer, runner).run(_context())
        assert context.image_quality is not None
        assert context.image_quality.score == 0.5
        assert context.image_quality.file_size == len(b"raw-bytes")
        assert context.degraded == ["Image analysis unavailable: Cannot decode image"]


class TestTextExtractionStep:
    def test_extracts_from_image_bytes_with_language(self, runner: CapabilityRunner) -> None:
        extractor = StubTextExtractor()
        context = TextExtractionStep(extractor, runner, language="deu").run(_context())
        assert extractor.calls == [(b"image-bytes", "deu")]
        assert context.text == INVOICE_TEXT

    def test_failure_yields_empty_text(self, runner: CapabilityRunner) -> None:
        extractor = MagicMock()
        extractor.extract.side_effect = TextExtractionError("tesseract is not installed")
        context = TextExtractionStep(extractor, runner).run(_context())
        assert context.ocr is not None
        assert context.ocr.text == ""
        assert context.ocr.confidence == 0.0
        assert context.degraded == ["Text extraction unavailable: tesseract is not installed"]

    def test_timeout_yields_empty_text(self, runner: CapabilityRunner) -> None:
        extractor = StallingTextExtractor()
        try:
            context = TextExtractionStep(extractor, runner).run(_context())
        finally:
            extractor.release.set()
        assert context.text == ""
        assert context.degraded == [
            "Text extraction unavailable: text extraction timed out after 0.05s"
        ]


class TestStructureStep:
    def test_matches_extracted_text(self) -> None:
        context = StructureStep(StructureMatcher()).run(_context(text=INVOICE_TEXT))
        assert context.structure is not None
        assert context.structure.flag("has_invoice_number") is True

    def test_no_text_scores_zero(self) -> None:
        context = StructureStep(StructureMatcher()).run(_context())
        assert context.structure is not None
        assert context.structure.score == 0.0


class TestFraudHeuristicsStep:
    def _step(self, analyzer: object, runner: CapabilityRunner, clock: FakeClock) -> FraudHeuristicsStep:
        heuristics = FraudHeuristics(InMemoryFraudPatternCache(), clock=clock)
        return FraudHeuristicsStep(heuristics, analyzer, runner)  # type: ignore[arg-type]

    def test_inspects_raw_bytes(self, runner: CapabilityRunner, clock: FakeClock) -> None:
        analyzer = MagicMock()
        analyzer.inspect.return_value = ImageMetadata(format="png", has_exif=False, has_alpha=True)
        context = self._step(analyzer, runner, clock).run(_context(text=INVOICE_TEXT))
        analyzer.inspect.assert_called_once_with(b"raw-bytes")
        assert context.fraud is not None
        assert context.fraud.flags == (FLAG_MANIPULATED,)

    def test_pdf_skips_inspection(self, runner: CapabilityRunner, clock: FakeClock) -> None:
        analyzer = MagicMock()
        context = self._step(analyzer, runner, clock).run(_context(fmt="pdf", text=INVOICE_TEXT))
        analyzer.inspect.assert_not_called()
        assert context.fraud is not None
        assert context.fraud.manipulated_image is False

    def test_inspection_failure_counts_as_no_evidence(
        self, runner: CapabilityRunner, clock: FakeClock
    ) -> None:
        analyzer = MagicMock()
        analyzer.inspect.side_effect = ImageAnalysisError("bad header")
        context = self._step(analyzer, runner, clock).run(_context(text=INVOICE_TEXT))
        assert context.fraud is not None
        assert context.fraud.score == 0.0
        assert context.degraded == ["Image metadata inspection unavailable: bad header"]


class TestClassificationStep:
    def test_matching_prediction(self, runner: CapabilityRunner) -> None:
        context = ClassificationStep(StubClassifier(DocumentType.INVOICE, 0.9), runner).run(
            _context(text=INVOICE_TEXT)
        )
        assert context.classification is not None
        assert context.classification.match is True
        assert context.classification.confidence == pytest.approx(0.9)

    def test_mismatching_prediction(self, runner: CapabilityRunner) -> None:
        classifier = StubClassifier(DocumentType.ID_DOCUMENT, 0.8)
        context = ClassificationStep(classifier, runner).run(_context(text="Passport"))
        assert context.classification is not None
        assert context.classification.predicted_type == DocumentType.ID_DOCUMENT
        assert context.classification.match is False

    def test_tie_resolves_to_first_type(self, runner: CapabilityRunner) -> None:
        classifier = MagicMock()
        classifier.classify.return_value = {t: 0.2 for t in DocumentType}
        context = ClassificationStep(classifier, runner).run(_context())
        assert context.classification is not None
        assert context.classification.predicted_type == DocumentType.INVOICE

    def test_failure_assumes_declared_type(self, runner: CapabilityRunner) -> None:
        classifier = MagicMock()
        classifier.classify.side_effect = ClassificationError("model missing")
        context = ClassificationStep(classifier, runner).run(_context())
        assert context.classification is not None
        assert context.classification.match is True
        assert context.classification.confidence == 0.5
        assert context.classification.error == "model missing"
        assert context.classification.probabilities[DocumentType.INVOICE] == 0.5
        assert set(context.classification.probabilities) == set(DocumentType)
        assert sum(context.classification.probabilities.values()) == pytest.approx(1.0)
        assert context.degraded == ["Document classification unavailable: model missing"]


class TestMetadataConsistencyStep:
    def test_checks_declared_metadata(self) -> None:
        metadata = DocumentMetadata(amount=1250.00, issuer_name="Northwind Traders LLC")
        context = MetadataConsistencyStep(MetadataConsistencyChecker()).run(
            _context(metadata=metadata, text=INVOICE_TEXT)
        )
        assert context.consistency is not None
        assert context.consistency.amount_match is True
        assert context.consistency.name_match is True
        assert context.consistency.score == 1.0
