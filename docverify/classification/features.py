"""Deterministic text features for the document-type classifier.

The vector has a fixed length; unused slots stay zero and are reserved
for future features.
"""

from docverify.verification.dates import find_date_strings
from docverify.verification.models import DocumentType
from docverify.verification.patterns import AMOUNT_RE, NUMBER_RE

FEATURE_VECTOR_SIZE = 100

WORD_COUNT_SLOT = 0
NUMBER_COUNT_SLOT = 50
DATE_COUNT_SLOT = 51
AMOUNT_COUNT_SLOT = 52

# slot, document type it is evidence for, keywords
KEYWORD_SLOTS: tuple[tuple[int, DocumentType, tuple[str, ...]], ...] = (
    (1, DocumentType.INVOICE, ("invoice", "bill", "payment")),
    (10, DocumentType.BUSINESS_LICENSE, ("license", "permit", "certificate")),
    (20, DocumentType.TAX_DOCUMENT, ("tax", "revenue", "irs")),
    (30, DocumentType.BANK_STATEMENT, ("bank", "account", "statement")),
    (40, DocumentType.ID_DOCUMENT, ("identification", "passport", "license")),
)


def extract_features(text: str) -> list[float]:
    features = [0.0] * FEATURE_VECTOR_SIZE
    text = text or ""
    lowered = text.lower()

    features[WORD_COUNT_SLOT] = _ratio(len(lowered.split()), 1000)
    for slot, _document_type, keywords in KEYWORD_SLOTS:
        features[slot] = 1.0 if any(k in lowered for k in keywords) else 0.0
    features[NUMBER_COUNT_SLOT] = _ratio(len(NUMBER_RE.findall(text)), 50)
    features[DATE_COUNT_SLOT] = _ratio(len(find_date_strings(text)), 10)
    features[AMOUNT_COUNT_SLOT] = _ratio(len(AMOUNT_RE.findall(text)), 20)
    return features


def _ratio(count: int, cap: int) -> float:
    return min(count / cap, 1.0)
