import re

from docverify.verification.models import DocumentType, StructureResult
from docverify.verification.patterns import (
    ACCOUNT_NUMBER_RE,
    ADDRESS_RE,
    AMOUNT_RE,
    AUTHORITY_RE,
    BALANCE_RE,
    BANK_NAME_RE,
    DATE_PATTERNS,
    DUE_DATE_RE,
    EMAIL_RE,
    EXPIRATION_RE,
    INVOICE_NUMBER_RE,
    LICENSE_NUMBER_RE,
    LINE_ITEMS_RE,
    NUMBER_RE,
    PHONE_RE,
)

TYPE_SPECIFIC_CHECKS: dict[DocumentType, tuple[tuple[str, re.Pattern[str]], ...]] = {
    DocumentType.INVOICE: (
        ("has_invoice_number", INVOICE_NUMBER_RE),
        ("has_due_date", DUE_DATE_RE),
        ("has_itemized", LINE_ITEMS_RE),
    ),
    DocumentType.BUSINESS_LICENSE: (
        ("has_license_number", LICENSE_NUMBER_RE),
        ("has_expiration", EXPIRATION_RE),
        ("has_authority", AUTHORITY_RE),
    ),
    DocumentType.BANK_STATEMENT: (
        ("has_bank_name", BANK_NAME_RE),
        ("has_account_number", ACCOUNT_NUMBER_RE),
        ("has_balance", BALANCE_RE),
    ),
}


class StructureMatcher:
    """Pure text matcher for document-shape markers.

    Generic markers are checked for every document; the declared type adds
    its own markers (tax and ID documents have none). The score is the
    fraction of applicable markers present.
    """

    def match(self, text: str, document_type: DocumentType) -> StructureResult:
        text = text or ""
        generic = {
            "has_numbers": bool(NUMBER_RE.search(text)),
            "has_dates": any(p.search(text) for p in DATE_PATTERNS),
            "has_amounts": bool(AMOUNT_RE.search(text)),
            "has_addresses": bool(ADDRESS_RE.search(text)),
            "has_emails": bool(EMAIL_RE.search(text)),
            "has_phones": bool(PHONE_RE.search(text)),
        }
        type_specific = {
            name: bool(pattern.search(text))
            for name, pattern in TYPE_SPECIFIC_CHECKS.get(document_type, ())
        }
        checks = [*generic.values(), *type_specific.values()]
        score = sum(checks) / len(checks)
        return StructureResult(
            **generic,
            type_specific=type_specific,
            score=max(0.0, min(1.0, score)),
        )
