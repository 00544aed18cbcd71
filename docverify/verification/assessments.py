"""Verdicts derived from a finished report for specific submission flows."""

from dataclasses import dataclass
from typing import Any

from docverify.verification.document_loader import SUPPORTED_MIME_TYPES
from docverify.verification.models import DocumentType, VerificationReport

KYC_MIN_CONFIDENCE = 0.75
KYC_MAX_FRAUD_SCORE = 0.25

KYC_APPROVED = "APPROVED"
KYC_REVIEW_REQUIRED = "REVIEW_REQUIRED"

FEATURES: tuple[str, ...] = (
    "OCR text extraction",
    "Image quality analysis",
    "Fraud pattern detection",
    "ML-based classification",
    "Metadata consistency checking",
    "Structure analysis",
)


@dataclass(frozen=True)
class InvoiceSummary:
    has_invoice_number: bool
    has_due_date: bool
    has_itemized: bool
    amount_matches: bool


@dataclass(frozen=True)
class KycAssessment:
    status: str
    next_steps: tuple[str, ...]

    @property
    def approved(self) -> bool:
        return self.status == KYC_APPROVED


def invoice_summary(report: VerificationReport) -> InvoiceSummary:
    """Invoice-specific fields pulled from the structure and consistency results."""
    structure = report.structure
    return InvoiceSummary(
        has_invoice_number=structure.flag("has_invoice_number"),
        has_due_date=structure.flag("has_due_date"),
        has_itemized=structure.flag("has_itemized"),
        amount_matches=bool(report.consistency.amount_match),
    )


def assess_kyc(report: VerificationReport) -> KycAssessment:
    """KYC documents need a stricter verdict than plain authenticity."""
    passed = (
        report.authentic
        and report.confidence > KYC_MIN_CONFIDENCE
        and report.fraud_score < KYC_MAX_FRAUD_SCORE
    )
    if passed:
        return KycAssessment(
            status=KYC_APPROVED,
            next_steps=("KYC verification complete", "Proceed with account activation"),
        )
    return KycAssessment(
        status=KYC_REVIEW_REQUIRED,
        next_steps=("Manual review required", "Additional documentation may be needed"),
    )


def supported_capabilities(max_document_bytes: int) -> dict[str, Any]:
    return {
        "document_types": [t.value for t in DocumentType],
        "file_formats": sorted(set(SUPPORTED_MIME_TYPES.values())),
        "max_file_size_bytes": max_document_bytes,
        "features": list(FEATURES),
    }
