import time
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Any

from docverify.cache.base import BaseFraudPatternCache
from docverify.cache.memory import InMemoryFraudPatternCache
from docverify.classification.base import BaseDocumentClassifier
from docverify.classification.factory import ClassifierFactory
from docverify.config.settings import Settings
from docverify.imaging.base import BaseImageAnalyzer
from docverify.imaging.factory import ImageAnalyzerFactory
from docverify.logging.logger import Log
from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.factory import TextExtractorFactory
from docverify.pdf.factory import PdfRendererFactory
from docverify.verification.assessments import supported_capabilities
from docverify.verification.capabilities import CapabilityRunner
from docverify.verification.clock import Clock, utc_now
from docverify.verification.consistency import MetadataConsistencyChecker
from docverify.verification.document_loader import DocumentLoader
from docverify.verification.exceptions import InvalidDocumentError, VerificationError
from docverify.verification.fraud import FraudHeuristics
from docverify.verification.fusion import ReportBuilder
from docverify.verification.models import (
    BatchItemResult,
    BatchSummary,
    BatchVerificationResult,
    DocumentMetadata,
    DocumentType,
    VerificationReport,
    VerificationRequest,
)
from docverify.verification.pipeline import VerificationContext, VerificationStep
from docverify.verification.policy import DEFAULT_POLICY, VerificationPolicy
from docverify.verification.statistics import StatisticsSnapshot, VerificationStatistics
from docverify.verification.steps import (
    ClassificationStep,
    FraudHeuristicsStep,
    ImageQualityStep,
    MetadataConsistencyStep,
    StructureStep,
    TextExtractionStep,
)
from docverify.verification.structure import StructureMatcher

DEFAULT_RETENTION_DAYS = 30


class VerificationEngine:
    """Runs the verification pipeline for one document at a time.

    Pipeline: load -> image quality -> OCR -> structure -> fraud heuristics
    -> classification -> metadata consistency -> fusion.
    """

    def __init__(
        self,
        *,
        loader: DocumentLoader,
        steps: Sequence[VerificationStep],
        cache: BaseFraudPatternCache,
        report_builder: ReportBuilder | None = None,
        statistics: VerificationStatistics | None = None,
        clock: Clock = utc_now,
        runner: CapabilityRunner | None = None,
        batch_max_workers: int = 4,
        batch_max_documents: int = 10,
        max_document_bytes: int = 50 * 1024 * 1024,
        cache_retention_days: int = DEFAULT_RETENTION_DAYS,
    ) -> None:
        self._loader = loader
        self._steps = list(steps)
        self._cache = cache
        self._report_builder = report_builder or ReportBuilder()
        self._statistics = statistics or VerificationStatistics()
        self._clock = clock
        self._runner = runner
        self._batch_max_workers = batch_max_workers
        self._batch_max_documents = batch_max_documents
        self._max_document_bytes = max_document_bytes
        self._cache_retention_days = cache_retention_days

    def verify(
        self,
        document_bytes: bytes,
        document_type: DocumentType | str,
        metadata: DocumentMetadata | Mapping[str, Any] | None = None,
    ) -> VerificationReport:
        """Verify one document.

        Raises:
            InvalidDocumentError: if the document has no analyzable content.
        """
        return self.verify_request(build_request(document_bytes, document_type, metadata))

    def verify_request(self, request: VerificationRequest) -> VerificationReport:
        started = time.perf_counter()
        try:
            document = self._loader.load(request)
        except InvalidDocumentError as exc:
            self._statistics.record_rejection()
            Log.warning(
                f"Rejected document: {exc}", document_type=request.document_type.value
            )
            raise

        Log.info(
            f"Verifying {document.format} {request.document_type.value} "
            f"({len(document.raw_bytes)} bytes)"
        )
        context = VerificationContext(request=request, document=document)
        for step in self._steps:
            context = step.run(context)

        report = self._report_builder.build(
            context,
            timestamp=self._clock(),
            processing_time_ms=int((time.perf_counter() - started) * 1000),
        )
        self._statistics.record_report(report)
        Log.info(
            "Document verified",
            document_id=report.document_id,
            authentic=report.authentic,
            confidence=round(report.confidence, 3),
            fraud_score=round(report.fraud_score, 3),
            processing_time_ms=report.processing_time_ms,
        )
        return report

    def verify_batch(self, requests: Sequence[VerificationRequest]) -> BatchVerificationResult:
        """Verify several documents concurrently; one bad document does not fail the batch.

        Raises:
            InvalidDocumentError: if the batch is empty or too large.
        """
        if not requests:
            raise InvalidDocumentError("No documents provided")
        if len(requests) > self._batch_max_documents:
            raise InvalidDocumentError(
                f"Batch of {len(requests)} documents exceeds limit of {self._batch_max_documents}"
            )

        workers = min(self._batch_max_workers, len(requests))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="docverify-batch") as pool:
            items = tuple(pool.map(self._verify_item, range(len(requests)), requests))

        successful = sum(1 for item in items if item.report is not None and item.report.authentic)
        summary = BatchSummary(
            total=len(items),
            successful=successful,
            failed=len(items) - successful,
        )
        Log.info(f"Batch verified: {summary.successful}/{summary.total} authentic")
        return BatchVerificationResult(items=items, summary=summary)

    def evict_stale_cache_entries(self, retention_days: int | None = None) -> int:
        """Drop fraud pattern entries first seen more than ``retention_days`` ago.

        Defaults to the engine's configured retention. Meant for an external
        scheduler; verification never evicts on its own.
        """
        if retention_days is None:
            retention_days = self._cache_retention_days
        if retention_days < 0:
            raise ValueError("retention_days must be non-negative")
        cutoff = self._clock() - timedelta(days=retention_days)
        removed = self._cache.evict_older_than(cutoff)
        Log.info(
            f"Evicted {removed} fraud pattern entries older than {retention_days} days, "
            f"{len(self._cache)} remain"
        )
        return removed

    def statistics(self) -> StatisticsSnapshot:
        return self._statistics.snapshot()

    def supported_capabilities(self) -> dict[str, Any]:
        return supported_capabilities(self._max_document_bytes)

    def close(self) -> None:
        if self._runner is not None:
            self._runner.shutdown()

    def __enter__(self) -> "VerificationEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _verify_item(self, index: int, request: VerificationRequest) -> BatchItemResult:
        try:
            return BatchItemResult(index=index, report=self.verify_request(request))
        except VerificationError as exc:
            return BatchItemResult(index=index, error=str(exc))


def build_request(
    document_bytes: bytes,
    document_type: DocumentType | str,
    metadata: DocumentMetadata | Mapping[str, Any] | None = None,
) -> VerificationRequest:
    """Normalize loose caller input into a VerificationRequest.

    Raises:
        InvalidDocumentError: for an unknown document type.
    """
    try:
        resolved_type = DocumentType(document_type)
    except ValueError as exc:
        raise InvalidDocumentError(
            f"Unknown document type '{document_type}'. "
            f"Choose from: {[t.value for t in DocumentType]}"
        ) from exc
    if not isinstance(metadata, DocumentMetadata):
        metadata = DocumentMetadata.from_mapping(metadata)
    return VerificationRequest(
        document_bytes=bytes(document_bytes or b""),
        document_type=resolved_type,
        metadata=metadata,
    )


def build_engine(
    settings: Settings,
    *,
    cache: BaseFraudPatternCache | None = None,
    clock: Clock = utc_now,
    policy: VerificationPolicy = DEFAULT_POLICY,
    image_analyzer: BaseImageAnalyzer | None = None,
    text_extractor: BaseTextExtractor | None = None,
    classifier: BaseDocumentClassifier | None = None,
) -> VerificationEngine:
    """Build a VerificationEngine with all required adapters."""
    Log.configure(settings.log_level)
    runner = CapabilityRunner(settings.capability_timeout_seconds)
    analyzer = image_analyzer or ImageAnalyzerFactory.create(settings)
    extractor = text_extractor or TextExtractorFactory.create(settings)
    document_classifier = classifier or ClassifierFactory.create(settings)
    fraud_cache = cache if cache is not None else InMemoryFraudPatternCache()

    loader = DocumentLoader(
        PdfRendererFactory.create(settings),
        max_document_bytes=settings.max_document_bytes,
    )
    steps: list[VerificationStep] = [
        ImageQualityStep(analyzer, runner),
        TextExtractionStep(extractor, runner, language=settings.ocr_language),
        StructureStep(StructureMatcher()),
        FraudHeuristicsStep(FraudHeuristics(fraud_cache, clock=clock), analyzer, runner),
        ClassificationStep(document_classifier, runner),
        MetadataConsistencyStep(MetadataConsistencyChecker()),
    ]
    return VerificationEngine(
        loader=loader,
        steps=steps,
        cache=fraud_cache,
        report_builder=ReportBuilder(policy),
        clock=clock,
        runner=runner,
        batch_max_workers=settings.batch_max_workers,
        batch_max_documents=settings.batch_max_documents,
        max_document_bytes=settings.max_document_bytes,
        cache_retention_days=settings.fraud_cache_retention_days,
    )
