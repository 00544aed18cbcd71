"""Signal fusion and report assembly.

Confidence is a fixed-weight linear combination of the stage scores:

    image quality        0.15
    OCR text quality     0.25
    structure            0.20
    1 - fraud score      0.20
    classification       0.15  (confidence if the type matches, else 0)
    metadata consistency 0.05

The fraud score is the fraud stage's score, unmodified.
"""

import secrets
from datetime import datetime
from typing import TypeVar

from docverify.imaging.models import (
    MIN_ACCEPTABLE_HEIGHT,
    MIN_ACCEPTABLE_WIDTH,
    ImageQualityResult,
)
from docverify.ocr.models import OcrResult
from docverify.verification.models import (
    ClassificationResult,
    ConsistencyResult,
    FraudResult,
    StructureResult,
    VerificationReport,
)
from docverify.verification.pipeline import VerificationContext
from docverify.verification.policy import DEFAULT_POLICY, VerificationPolicy

MIN_IMAGE_SCORE = 0.5
MIN_OCR_CONFIDENCE = 0.6
MIN_STRUCTURE_SCORE = 0.5
MIN_SHARPNESS = 0.5
MAX_LOW_CONFIDENCE_WORD_FRACTION = 0.3
MANUAL_REVIEW_FRAUD_SCORE = 0.3
MIN_CONSISTENCY_SCORE = 0.5

WARN_IMAGE_QUALITY = "Poor image quality detected - may affect verification accuracy"
WARN_OCR_CONFIDENCE = "Low text extraction confidence - document may be unclear"
WARN_STRUCTURE = "Document structure incomplete or non-standard"

RECOMMEND_RESOLUTION = (
    f"Upload a higher resolution image (minimum {MIN_ACCEPTABLE_WIDTH}x{MIN_ACCEPTABLE_HEIGHT})"
)
RECOMMEND_FOCUS = "Ensure document is in focus when capturing"
RECOMMEND_LIGHTING = "Improve lighting and contrast when capturing document"
RECOMMEND_MANUAL_REVIEW = "Manual review recommended due to fraud indicators"
RECOMMEND_VERIFY_DATA = "Verify that provided information matches document content"

T = TypeVar("T")


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class ReportBuilder:
    """Fuses stage results into a write-once VerificationReport."""

    def __init__(self, policy: VerificationPolicy = DEFAULT_POLICY) -> None:
        self._policy = policy

    @property
    def policy(self) -> VerificationPolicy:
        return self._policy

    def build(
        self,
        context: VerificationContext,
        *,
        timestamp: datetime,
        processing_time_ms: int = 0,
    ) -> VerificationReport:
        image = _require(context.image_quality, "image_quality")
        ocr = _require(context.ocr, "ocr")
        structure = _require(context.structure, "structure")
        fraud = _require(context.fraud, "fraud")
        classification = _require(context.classification, "classification")
        consistency = _require(context.consistency, "consistency")

        confidence = self.confidence(image, ocr, structure, fraud, classification, consistency)
        fraud_score = clamp(fraud.score)
        return VerificationReport(
            document_id=secrets.token_hex(16),
            timestamp=timestamp,
            document_type=context.request.document_type,
            image_quality=image,
            ocr=ocr,
            structure=structure,
            fraud=fraud,
            classification=classification,
            consistency=consistency,
            confidence=confidence,
            fraud_score=fraud_score,
            authentic=self._policy.is_authentic(confidence, fraud_score),
            warnings=tuple(
                warnings(image, ocr, structure, fraud, classification) + context.degraded
            ),
            recommendations=tuple(recommendations(image, ocr, fraud, consistency)),
            processing_time_ms=processing_time_ms,
        )

    def confidence(
        self,
        image: ImageQualityResult,
        ocr: OcrResult,
        structure: StructureResult,
        fraud: FraudResult,
        classification: ClassificationResult,
        consistency: ConsistencyResult,
    ) -> float:
        w = self._policy.weights
        classification_score = classification.confidence if classification.match else 0.0
        score = (
            clamp(image.score) * w.image_quality
            + clamp(ocr.text_quality) * w.ocr_text_quality
            + clamp(structure.score) * w.structure
            + (1.0 - clamp(fraud.score)) * w.fraud_free
            + clamp(classification_score) * w.classification
            + clamp(consistency.score) * w.metadata_consistency
        )
        return clamp(score)


def warnings(
    image: ImageQualityResult,
    ocr: OcrResult,
    structure: StructureResult,
    fraud: FraudResult,
    classification: ClassificationResult,
) -> list[str]:
    result: list[str] = []
    if image.score < MIN_IMAGE_SCORE:
        result.append(WARN_IMAGE_QUALITY)
    if ocr.confidence < MIN_OCR_CONFIDENCE:
        result.append(WARN_OCR_CONFIDENCE)
    if structure.score < MIN_STRUCTURE_SCORE:
        result.append(WARN_STRUCTURE)
    result.extend(fraud.flags)
    if not classification.match:
        result.append(
            f"Document appears to be {classification.predicted_type.value}, "
            f"not {classification.expected_type.value}"
        )
    return result


def recommendations(
    image: ImageQualityResult,
    ocr: OcrResult,
    fraud: FraudResult,
    consistency: ConsistencyResult,
) -> list[str]:
    result: list[str] = []
    # a neutral (failed) image analysis carries no resolution to judge
    if image.error is None and not image.resolution.acceptable:
        result.append(RECOMMEND_RESOLUTION)
    if image.error is None and image.sharpness < MIN_SHARPNESS:
        result.append(RECOMMEND_FOCUS)
    if ocr.words and ocr.low_confidence_fraction > MAX_LOW_CONFIDENCE_WORD_FRACTION:
        result.append(RECOMMEND_LIGHTING)
    if fraud.score > MANUAL_REVIEW_FRAUD_SCORE:
        result.append(RECOMMEND_MANUAL_REVIEW)
    if consistency.score < MIN_CONSISTENCY_SCORE:
        result.append(RECOMMEND_VERIFY_DATA)
    return result


def _require(value: T | None, name: str) -> T:
    if value is None:
        raise ValueError(f"VerificationContext.{name} must be set before fusion")
    return value
