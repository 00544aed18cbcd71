"""Fraud heuristics.

Five independent checks, evaluated in a fixed order so the flag list in a
report is deterministic. Missing inputs count as "no evidence of fraud".
"""

import hashlib
from datetime import date

from docverify.cache.base import BaseFraudPatternCache
from docverify.imaging.models import ImageMetadata
from docverify.logging.logger import Log
from docverify.verification.clock import Clock, utc_now
from docverify.verification.dates import find_date_strings, parse_date
from docverify.verification.models import (
    DocumentMetadata,
    FraudResult,
    amount_literal,
    to_plain,
)
from docverify.verification.patterns import (
    FILLER_TOKEN_RE,
    LONG_NUMBER_RE,
    PLACEHOLDER_WORD_RE,
    REPEATED_CHAR_RE,
)

FLAG_DUPLICATE = "Duplicate submission detected"
FLAG_MANIPULATED = "Possible image manipulation"
FLAG_DATES = "Date inconsistencies found"
FLAG_SUSPICIOUS_TEXT = "Suspicious text patterns"
FLAG_METADATA = "Metadata mismatch"

FRAUD_CHECK_COUNT = 5
EARLIEST_PLAUSIBLE_DATE = date(2000, 1, 1)
MIN_PLAUSIBLE_DPI = 72
MIN_TAMPER_INDICATORS = 2


def content_hash(document_bytes: bytes) -> str:
    return hashlib.sha256(document_bytes).hexdigest()


class FraudHeuristics:
    """Runs the fraud checks. Only the duplicate check mutates state (the cache)."""

    def __init__(self, cache: BaseFraudPatternCache, clock: Clock = utc_now) -> None:
        self._cache = cache
        self._clock = clock

    def evaluate(
        self,
        document_bytes: bytes,
        ocr_text: str,
        metadata: DocumentMetadata,
        image_metadata: ImageMetadata | None = None,
    ) -> FraudResult:
        checks = (
            (FLAG_DUPLICATE, self.is_duplicate(document_bytes, metadata)),
            (FLAG_MANIPULATED, is_manipulated(image_metadata)),
            (FLAG_DATES, has_inconsistent_dates(ocr_text, self._clock().date())),
            (FLAG_SUSPICIOUS_TEXT, has_suspicious_patterns(ocr_text)),
            (FLAG_METADATA, has_metadata_mismatch(metadata, ocr_text)),
        )
        flags = tuple(label for label, hit in checks if hit)
        return FraudResult(
            duplicate_submission=checks[0][1],
            manipulated_image=checks[1][1],
            inconsistent_dates=checks[2][1],
            suspicious_patterns=checks[3][1],
            metadata_mismatch=checks[4][1],
            score=max(0.0, min(1.0, len(flags) / FRAUD_CHECK_COUNT)),
            flags=flags,
        )

    def is_duplicate(self, document_bytes: bytes, metadata: DocumentMetadata) -> bool:
        digest = content_hash(document_bytes)
        previous = self._cache.check_and_record(digest, self._clock(), to_plain(metadata))
        if previous is not None:
            Log.debug(f"Hash {digest[:12]} first seen at {previous.first_seen.isoformat()}")
        return previous is not None


def is_manipulated(image_metadata: ImageMetadata | None) -> bool:
    """At least two of: no EXIF, alpha channel on a PNG, DPI below 72."""
    if image_metadata is None or image_metadata.error:
        return False
    indicators = (
        not image_metadata.has_exif,
        image_metadata.format == "png" and image_metadata.has_alpha,
        image_metadata.dpi is not None and image_metadata.dpi < MIN_PLAUSIBLE_DPI,
    )
    return sum(indicators) >= MIN_TAMPER_INDICATORS


def has_inconsistent_dates(text: str, today: date) -> bool:
    """Any date in the future or before 2000 is suspicious for a fresh document."""
    for raw in find_date_strings(text):
        parsed = parse_date(raw)
        if parsed is None:
            continue
        if parsed > today or parsed < EARLIEST_PLAUSIBLE_DATE:
            return True
    return False


def has_suspicious_patterns(text: str) -> bool:
    if not text:
        return False
    return any(
        pattern.search(text)
        for pattern in (PLACEHOLDER_WORD_RE, FILLER_TOKEN_RE, REPEATED_CHAR_RE, LONG_NUMBER_RE)
    )


def has_metadata_mismatch(metadata: DocumentMetadata, text: str) -> bool:
    if metadata.amount is None or not text:
        return False
    return amount_literal(metadata.amount) not in text.replace(",", "")
