from datetime import date

from dateutil import parser as date_parser

from docverify.verification.patterns import DATE_PATTERNS


def find_date_strings(text: str) -> list[str]:
    """Return every date-like substring, grouped by pattern in declaration order."""
    if not text:
        return []
    found: list[str] = []
    for pattern in DATE_PATTERNS:
        found.extend(match.group(0) for match in pattern.finditer(text))
    return found


def parse_date(value: str) -> date | None:
    """Parse a date-like string; month-first for ambiguous numeric forms."""
    try:
        return date_parser.parse(value, fuzzy=False).date()
    except (ValueError, OverflowError):
        return None


def format_short_date(value: date) -> str:
    """US short form without zero padding, e.g. 3/15/2024."""
    return f"{value.month}/{value.day}/{value.year}"
