from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docverify.imaging.models import ImageMetadata, ImageQualityResult
from docverify.ocr.models import OcrResult
from docverify.verification.document_loader import PreparedDocument
from docverify.verification.models import (
    ClassificationResult,
    ConsistencyResult,
    FraudResult,
    StructureResult,
    VerificationRequest,
)


@dataclass(slots=True)
class VerificationContext:
    """Accumulates stage outputs as a request moves through the pipeline."""

    request: VerificationRequest
    document: PreparedDocument
    image_quality: ImageQualityResult | None = None
    image_metadata: ImageMetadata | None = None
    ocr: OcrResult | None = None
    structure: StructureResult | None = None
    fraud: FraudResult | None = None
    classification: ClassificationResult | None = None
    consistency: ConsistencyResult | None = None
    degraded: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.ocr.text if self.ocr is not None else ""


class VerificationStep(ABC):
    @abstractmethod
    def run(self, context: VerificationContext) -> VerificationContext:
        raise NotImplementedError
