from dataclasses import dataclass, field


@dataclass(frozen=True)
class FusionWeights:
    """Per-signal weights of the confidence score. Must sum to 1.0."""

    image_quality: float = 0.15
    ocr_text_quality: float = 0.25
    structure: float = 0.20
    fraud_free: float = 0.20
    classification: float = 0.15
    metadata_consistency: float = 0.05

    def __post_init__(self) -> None:
        total = (
            self.image_quality
            + self.ocr_text_quality
            + self.structure
            + self.fraud_free
            + self.classification
            + self.metadata_consistency
        )
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Fusion weights must sum to 1.0, got {total}")


@dataclass(frozen=True)
class VerificationPolicy:
    """Engine-wide decision constants."""

    weights: FusionWeights = field(default_factory=FusionWeights)
    min_authentic_confidence: float = 0.7
    max_authentic_fraud_score: float = 0.3

    def is_authentic(self, confidence: float, fraud_score: float) -> bool:
        return (
            confidence > self.min_authentic_confidence
            and fraud_score < self.max_authentic_fraud_score
        )


DEFAULT_POLICY = VerificationPolicy()
