"""Date parsing utilities for statement text."""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

_MONTHS = (
    r"(?:January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\b"
)

# Date tokens that may open a statement line, most specific first.
DATE_TOKEN = (
    rf"\d{{4}}-\d{{2}}-\d{{2}}"
    rf"|\d{{1,2}}[/.\-]\d{{1,2}}[/.\-]\d{{2,4}}"
    rf"|\d{{1,2}}\s+{_MONTHS}(?:\s+\d{{4}})?"
    rf"|{_MONTHS}\s+\d{{1,2}}(?:,?\s+\d{{4}})?"
)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_RE = re.compile(rf"\b(?:{DATE_TOKEN})\b", re.IGNORECASE)
LEADING_DATE_RE = re.compile(rf"^\s*(?P<date>{DATE_TOKEN})\b\s*", re.IGNORECASE)

STATEMENT_PERIOD_RE = re.compile(
    rf"(\d{{1,2}}\s+{_MONTHS}\s+\d{{4}}|\d{{1,2}}[/\-]\d{{1,2}}[/\-]\d{{4}})"
    rf"\s+to\s+"
    rf"(\d{{1,2}}\s+{_MONTHS}\s+\d{{4}}|\d{{1,2}}[/\-]\d{{1,2}}[/\-]\d{{4}})",
    re.IGNORECASE,
)


def parse_date(
    date_str: str, default_year: Optional[int] = None, day_first: bool = True
) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2025-01-10"), numeric day-first or month-first
    dates ("10/01/2025"), and textual dates with or without a year
    ("10 Jan 2025", "10 Jan"). Tokens without a year take ``default_year``.

    Args:
        date_str: Date string
        default_year: Year used when the token has none
        day_first: Interpret ambiguous numeric dates as day/month

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")

    token = date_str.strip()
    if ISO_DATE_RE.match(token):
        try:
            return date.fromisoformat(token)
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    year = default_year or date.today().year
    try:
        dt = date_parser.parse(
            token,
            dayfirst=day_first,
            default=datetime(year, 1, 1),
        )
        return dt.date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def resolve_month_day(
    month: int,
    day: int,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    fallback_year: Optional[int] = None,
) -> date:
    """Resolve a year-less MM DD pair against a statement period.

    Statements that straddle a year end print "12 28" and "01 03" on the
    same page; the year is taken from whichever end of the period makes the
    date fall inside it, else the closer candidate.

    Raises:
        ValueError: If month/day do not form a valid date
    """
    if period_start is not None and period_end is not None:
        candidates = []
        for year in sorted({period_start.year, period_end.year}):
            try:
                candidates.append(date(year, month, day))
            except ValueError:
                continue
        for candidate in candidates:
            if period_start <= candidate <= period_end:
                return candidate
        if candidates:
            return min(candidates, key=lambda c: abs((c - period_start).days))

    year = fallback_year or (period_start.year if period_start else date.today().year)
    return date(year, month, day)


def parse_statement_period(text: str) -> Optional[tuple[date, date]]:
    """Extract "16 February 2025 to 15 March 2025" style ranges.

    Returns:
        (start, end) tuple, or None if the text holds no period
    """
    match = STATEMENT_PERIOD_RE.search(text or "")
    if match is None:
        return None
    try:
        start = parse_date(match.group(1))
        end = parse_date(match.group(2))
    except ValueError:
        return None
    if start > end:
        return None
    return start, end
