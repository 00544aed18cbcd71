import re

from docverify.verification.dates import format_short_date, parse_date
from docverify.verification.models import ConsistencyResult, DocumentMetadata, amount_literal

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")


class MetadataConsistencyChecker:
    """Cross-checks declared amount, date and issuer against the extracted text.

    Only the expectations that were declared are checked, so the score
    denominator shrinks with them. No expectations at all scores 1.0.
    """

    def check(self, metadata: DocumentMetadata, text: str) -> ConsistencyResult:
        haystack = (text or "").lower()
        # thousands separators are ignored for the amount comparison only
        amount_haystack = haystack.replace(",", "")

        amount_match: bool | None = None
        date_match: bool | None = None
        name_match: bool | None = None

        if metadata.amount is not None:
            needle = _NON_AMOUNT_CHARS.sub("", amount_literal(metadata.amount))
            amount_match = bool(haystack) and bool(needle) and needle in amount_haystack

        if metadata.date:
            date_match = self._date_present(metadata.date, haystack)

        if metadata.issuer_name:
            name_match = bool(haystack) and metadata.issuer_name.strip().lower() in haystack

        checked = [m for m in (amount_match, date_match, name_match) if m is not None]
        score = sum(checked) / len(checked) if checked else 1.0
        return ConsistencyResult(
            amount_match=amount_match,
            date_match=date_match,
            name_match=name_match,
            score=max(0.0, min(1.0, score)),
        )

    @staticmethod
    def _date_present(declared: str, haystack: str) -> bool:
        if not haystack:
            return False
        parsed = parse_date(declared)
        if parsed is None:
            return declared.strip().lower() in haystack
        return format_short_date(parsed) in haystack
