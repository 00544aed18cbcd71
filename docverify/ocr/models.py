from collections.abc import Sequence
from dataclasses import dataclass

HIGH_CONFIDENCE_WORD = 0.8
LOW_CONFIDENCE_WORD = 0.6


@dataclass(frozen=True)
class OcrResult:
    """Output of the text extraction stage. Confidences are normalized to [0, 1]."""

    text: str = ""
    confidence: float = 0.0
    words: int = 0
    lines: int = 0
    blocks: int = 0
    high_confidence_words: int = 0
    low_confidence_words: int = 0
    text_quality: float = 0.0
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "OcrResult":
        """Fail-soft result: no text, zero confidence."""
        return cls(error=error)

    @classmethod
    def from_words(
        cls,
        text: str,
        word_confidences: Sequence[float],
        *,
        lines: int,
        blocks: int,
    ) -> "OcrResult":
        """Build a result from per-word confidences already scaled to [0, 1]."""
        words = len(word_confidences)
        confidence = sum(word_confidences) / words if words else 0.0
        high = sum(1 for c in word_confidences if c > HIGH_CONFIDENCE_WORD)
        low = sum(1 for c in word_confidences if c < LOW_CONFIDENCE_WORD)
        return cls(
            text=text,
            confidence=_clamp(confidence),
            words=words,
            lines=lines,
            blocks=blocks,
            high_confidence_words=high,
            low_confidence_words=low,
            text_quality=text_quality(confidence, high, words),
        )

    @property
    def low_confidence_fraction(self) -> float:
        return self.low_confidence_words / self.words if self.words else 0.0


def text_quality(confidence: float, high_confidence_words: int, words: int) -> float:
    """Blend overall confidence, share of confident words and text volume."""
    if words <= 0:
        return _clamp(confidence * 0.5)
    volume = 0.2 if words > 50 else words / 250
    return _clamp(confidence * 0.5 + (high_confidence_words / words) * 0.3 + volume)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))
