from docverify.classification.base import BaseDocumentClassifier
from docverify.classification.features import extract_features
from docverify.imaging.base import BaseImageAnalyzer
from docverify.imaging.models import ImageQualityResult
from docverify.logging.logger import Log
from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.models import OcrResult
from docverify.verification.capabilities import CapabilityRunner
from docverify.verification.consistency import MetadataConsistencyChecker
from docverify.verification.fraud import FraudHeuristics
from docverify.verification.models import ClassificationResult, DocumentType
from docverify.verification.pipeline import VerificationContext, VerificationStep
from docverify.verification.structure import StructureMatcher

FALLBACK_CLASSIFICATION_CONFIDENCE = 0.5


class ImageQualityStep(VerificationStep):
    def __init__(self, analyzer: BaseImageAnalyzer, runner: CapabilityRunner) -> None:
        self._analyzer = analyzer
        self._runner = runner

    def run(self, context: VerificationContext) -> VerificationContext:
        image_bytes = context.document.image_bytes
        try:
            context.image_quality = self._runner.call(
                "image analysis", self._analyzer.analyze, image_bytes
            )
        except Exception as exc:
            Log.warning(f"Image analysis degraded: {exc}")
            context.image_quality = ImageQualityResult.neutral(
                str(exc), file_size=len(context.document.raw_bytes)
            )
            context.degraded.append(f"Image analysis unavailable: {exc}")
            return context
        Log.info(f"Image quality score {context.image_quality.score:.2f}")
        return context


class TextExtractionStep(VerificationStep):
    def __init__(
        self,
        extractor: BaseTextExtractor,
        runner: CapabilityRunner,
        language: str = "eng",
    ) -> None:
        self._extractor = extractor
        self._runner = runner
        self._language = language

    def run(self, context: VerificationContext) -> VerificationContext:
        try:
            context.ocr = self._runner.call(
                "text extraction",
                self._extractor.extract,
                context.document.image_bytes,
                self._language,
            )
        except Exception as exc:
            Log.warning(f"Text extraction degraded: {exc}")
            context.ocr = OcrResult.failed(str(exc))
            context.degraded.append(f"Text extraction unavailable: {exc}")
            return context
        Log.info(
            f"Extracted {context.ocr.words} words "
            f"(confidence {context.ocr.confidence:.2f})"
        )
        return context


class StructureStep(VerificationStep):
    def __init__(self, matcher: StructureMatcher) -> None:
        self._matcher = matcher

    def run(self, context: VerificationContext) -> VerificationContext:
        context.structure = self._matcher.match(context.text, context.request.document_type)
        Log.debug(f"Structure score {context.structure.score:.2f}")
        return context


class FraudHeuristicsStep(VerificationStep):
    """Runs the fraud checks; image metadata comes from the analyzer capability."""

    def __init__(
        self,
        heuristics: FraudHeuristics,
        analyzer: BaseImageAnalyzer,
        runner: CapabilityRunner,
    ) -> None:
        self._heuristics = heuristics
        self._analyzer = analyzer
        self._runner = runner

    def run(self, context: VerificationContext) -> VerificationContext:
        if context.document.format != "pdf":
            try:
                context.image_metadata = self._runner.call(
                    "image inspection", self._analyzer.inspect, context.document.raw_bytes
                )
            except Exception as exc:
                Log.warning(f"Image inspection degraded: {exc}")
                context.degraded.append(f"Image metadata inspection unavailable: {exc}")

        context.fraud = self._heuristics.evaluate(
            context.document.raw_bytes,
            context.text,
            context.request.metadata,
            image_metadata=context.image_metadata,
        )
        if context.fraud.flags:
            Log.info(f"Fraud flags raised: {', '.join(context.fraud.flags)}")
        return context


class ClassificationStep(VerificationStep):
    def __init__(self, classifier: BaseDocumentClassifier, runner: CapabilityRunner) -> None:
        self._classifier = classifier
        self._runner = runner

    def run(self, context: VerificationContext) -> VerificationContext:
        expected = context.request.document_type
        features = extract_features(context.text)
        try:
            probabilities = self._runner.call(
                "document classification", self._classifier.classify, features
            )
            context.classification = _build_classification(probabilities, expected)
        except Exception as exc:
            Log.warning(f"Document classification degraded: {exc}")
            context.classification = ClassificationResult(
                predicted_type=expected,
                expected_type=expected,
                match=True,
                confidence=FALLBACK_CLASSIFICATION_CONFIDENCE,
                probabilities=_fallback_distribution(expected),
                error=str(exc),
            )
            context.degraded.append(f"Document classification unavailable: {exc}")
            return context
        Log.info(
            f"Classified as {context.classification.predicted_type.value} "
            f"({context.classification.confidence:.2f})"
        )
        return context


class MetadataConsistencyStep(VerificationStep):
    def __init__(self, checker: MetadataConsistencyChecker) -> None:
        self._checker = checker

    def run(self, context: VerificationContext) -> VerificationContext:
        context.consistency = self._checker.check(context.request.metadata, context.text)
        return context


def _build_classification(
    probabilities: dict[DocumentType, float],
    expected: DocumentType,
) -> ClassificationResult:
    distribution = {t: max(0.0, min(1.0, float(probabilities.get(t, 0.0)))) for t in DocumentType}
    # ties resolve to the first type in declaration order
    predicted = max(DocumentType, key=lambda t: distribution[t])
    return ClassificationResult(
        predicted_type=predicted,
        expected_type=expected,
        match=predicted == expected,
        confidence=distribution[predicted],
        probabilities=distribution,
    )


def _fallback_distribution(expected: DocumentType) -> dict[DocumentType, float]:
    """Declared type at the fallback confidence, the remainder shared evenly."""
    rest = (1.0 - FALLBACK_CLASSIFICATION_CONFIDENCE) / (len(DocumentType) - 1)
    return {
        t: FALLBACK_CLASSIFICATION_CONFIDENCE if t == expected else rest for t in DocumentType
    }
