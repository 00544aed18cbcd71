import threading
from collections import Counter
from dataclasses import dataclass

from docverify.verification.models import VerificationReport


@dataclass(frozen=True)
class StatisticsSnapshot:
    total_verifications: int
    authentic_verifications: int
    not_authentic_verifications: int
    rejected_documents: int
    average_confidence: float
    average_processing_time_ms: float
    top_fraud_flags: tuple[tuple[str, int], ...]


class VerificationStatistics:
    """Running totals across all verifications handled by one engine."""

    TOP_FLAGS = 5

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._authentic = 0
        self._rejected = 0
        self._confidence_sum = 0.0
        self._processing_ms_sum = 0
        self._flags: Counter[str] = Counter()

    def record_report(self, report: VerificationReport) -> None:
        with self._lock:
            self._total += 1
            self._authentic += int(report.authentic)
            self._confidence_sum += report.confidence
            self._processing_ms_sum += report.processing_time_ms
            self._flags.update(report.fraud.flags)

    def record_rejection(self) -> None:
        with self._lock:
            self._rejected += 1

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            total = self._total
            return StatisticsSnapshot(
                total_verifications=total,
                authentic_verifications=self._authentic,
                not_authentic_verifications=total - self._authentic,
                rejected_documents=self._rejected,
                average_confidence=self._confidence_sum / total if total else 0.0,
                average_processing_time_ms=self._processing_ms_sum / total if total else 0.0,
                top_fraud_flags=tuple(self._flags.most_common(self.TOP_FLAGS)),
            )
