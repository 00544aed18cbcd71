"""Regular expressions shared by the structure matcher, fraud heuristics and
classifier feature extraction."""

import re

NUMBER_RE = re.compile(r"\d+")
AMOUNT_RE = re.compile(r"\$?\d+[,.]?\d*\.?\d{2}")
ADDRESS_RE = re.compile(
    r"\d+\s+[A-Z][a-z]+\s+(Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd)\b",
    re.IGNORECASE,
)
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

# D/M/YYYY or M/D/YYYY, YYYY/M/D, and "March 15, 2024"
DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?<!\d)\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2})(?!\d)"),
    re.compile(r"(?<!\d)\d{4}[/-]\d{1,2}[/-]\d{1,2}(?!\d)"),
    re.compile(
        r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},?\s+\d{4}\b",
        re.IGNORECASE,
    ),
)

INVOICE_NUMBER_RE = re.compile(r"invoice\s*(?:no\.?|number)?\s*#?\s*\d+", re.IGNORECASE)
DUE_DATE_RE = re.compile(r"due\s*date", re.IGNORECASE)
LINE_ITEMS_RE = re.compile(r"quantity|price|total", re.IGNORECASE)

LICENSE_NUMBER_RE = re.compile(r"license\s*#?\s*\d+", re.IGNORECASE)
EXPIRATION_RE = re.compile(r"expir(?:ation|y|es)", re.IGNORECASE)
AUTHORITY_RE = re.compile(r"department|authority|commission", re.IGNORECASE)

BANK_NAME_RE = re.compile(r"bank|credit\s+union", re.IGNORECASE)
ACCOUNT_NUMBER_RE = re.compile(r"account\s*#?\s*\d+", re.IGNORECASE)
BALANCE_RE = re.compile(r"balance|total", re.IGNORECASE)

PLACEHOLDER_WORD_RE = re.compile(r"\b(?:test|sample|dummy|fake|example)\b", re.IGNORECASE)
FILLER_TOKEN_RE = re.compile(r"\b(?:xxx|000|111|999)\b", re.IGNORECASE)
REPEATED_CHAR_RE = re.compile(r"(.)\1{5,}")
LONG_NUMBER_RE = re.compile(r"\b\d{10,}\b")
