import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

from docverify.imaging.models import ImageQualityResult
from docverify.ocr.models import OcrResult
from docverify.verification.exceptions import InvalidDocumentError


class DocumentType(str, Enum):
    """Document types known to the engine, in classifier output order."""

    INVOICE = "invoice"
    BUSINESS_LICENSE = "business_license"
    TAX_DOCUMENT = "tax_document"
    BANK_STATEMENT = "bank_statement"
    ID_DOCUMENT = "id_document"


@dataclass(frozen=True)
class DocumentMetadata:
    """Declared expectations about the submitted document.

    ``extra`` carries caller context (invoice number, user id, ...) that is
    stored alongside the first sighting of a document but never scored.
    """

    amount: float | Decimal | None = None
    date: str | None = None
    issuer_name: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount is not None and not _is_finite_amount(self.amount):
            raise InvalidDocumentError(
                f"Declared amount must be a finite number, got {self.amount!r}"
            )
        if self.date is not None and not isinstance(self.date, str):
            raise InvalidDocumentError(f"Declared date must be a string, got {self.date!r}")
        if self.issuer_name is not None and not isinstance(self.issuer_name, str):
            raise InvalidDocumentError(
                f"Declared issuer name must be a string, got {self.issuer_name!r}"
            )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "DocumentMetadata":
        """Build metadata from a loose bag; accepts issuerName/issuer_name and
        expectedAmount as an alias of amount."""
        if not raw:
            return cls()
        data = dict(raw)
        amount = data.pop("amount", None)
        expected_amount = data.pop("expectedAmount", None)
        expected_amount = data.pop("expected_amount", expected_amount)
        issuer = data.pop("issuerName", None)
        issuer = data.pop("issuer_name", None) or issuer
        return cls(
            amount=_to_amount(amount if amount not in (None, "") else expected_amount),
            date=data.pop("date", None) or None,
            issuer_name=issuer or None,
            extra=data,
        )

    @property
    def is_empty(self) -> bool:
        return self.amount is None and not self.date and not self.issuer_name


@dataclass(frozen=True)
class VerificationRequest:
    """One document submission. Immutable for the duration of a verification."""

    document_bytes: bytes
    document_type: DocumentType
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass(frozen=True)
class StructureResult:
    """Presence of document-shape markers in the extracted text."""

    has_numbers: bool = False
    has_dates: bool = False
    has_amounts: bool = False
    has_addresses: bool = False
    has_emails: bool = False
    has_phones: bool = False
    type_specific: Mapping[str, bool] = field(default_factory=dict)
    score: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_specific", MappingProxyType(dict(self.type_specific)))

    def flag(self, name: str) -> bool:
        return bool(self.type_specific.get(name, False))


@dataclass(frozen=True)
class FraudResult:
    """Outcome of the five fraud heuristics. ``flags`` keeps evaluation order."""

    duplicate_submission: bool = False
    manipulated_image: bool = False
    inconsistent_dates: bool = False
    suspicious_patterns: bool = False
    metadata_mismatch: bool = False
    score: float = 0.0
    flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassificationResult:
    predicted_type: DocumentType
    expected_type: DocumentType
    match: bool
    confidence: float
    probabilities: Mapping[DocumentType, float] = field(default_factory=dict)
    error: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "probabilities", MappingProxyType(dict(self.probabilities)))


@dataclass(frozen=True)
class ConsistencyResult:
    """Declared metadata vs extracted text. ``None`` means not checked."""

    amount_match: bool | None = None
    date_match: bool | None = None
    name_match: bool | None = None
    score: float = 0.0


@dataclass(frozen=True)
class VerificationReport:
    """Final, write-once verdict for one document."""

    document_id: str
    timestamp: datetime
    document_type: DocumentType
    image_quality: ImageQualityResult
    ocr: OcrResult
    structure: StructureResult
    fraud: FraudResult
    classification: ClassificationResult
    consistency: ConsistencyResult
    confidence: float
    fraud_score: float
    authentic: bool
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    processing_time_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Nested plain-data representation (JSON-ready)."""
        return to_plain(self)


@dataclass(frozen=True)
class BatchItemResult:
    """One entry of a batch: either a report or the rejection reason."""

    index: int
    report: VerificationReport | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.report is not None


@dataclass(frozen=True)
class BatchSummary:
    total: int
    successful: int
    failed: int

    @property
    def success_rate(self) -> float:
        """Percentage of authentic documents in the batch."""
        return round(self.successful / self.total * 100, 2) if self.total else 0.0


@dataclass(frozen=True)
class BatchVerificationResult:
    items: tuple[BatchItemResult, ...]
    summary: BatchSummary

    def to_dict(self) -> dict[str, Any]:
        data = to_plain(self)
        data["summary"]["success_rate"] = self.summary.success_rate
        return data


def to_plain(value: Any) -> Any:
    """Recursively convert dataclasses, enums and datetimes to plain data."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {to_plain(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def amount_literal(amount: float | Decimal) -> str:
    """Render an amount the way it is usually printed: 1250.00 -> '1250', 12.5 -> '12.5'."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def _to_amount(raw: Any) -> float | Decimal | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
        return raw
    try:
        return Decimal(str(raw).replace(",", "").strip())
    except ArithmeticError:
        return None


def _is_finite_amount(amount: Any) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return False
    if isinstance(amount, Decimal):
        return amount.is_finite()
    return math.isfinite(amount)
