"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

# Statement amount token: 1,234.56 with optional sign markers
# (leading/trailing minus, parentheses, Cr/Dr suffix).
AMOUNT_TOKEN = r"\(?-?\d{1,3}(?:,\d{3})*\.\d{2}\)?-?(?:\s?(?:Cr|Dr|CR|DR)\b)?|\(?-?\d+\.\d{2}\)?-?(?:\s?(?:Cr|Dr|CR|DR)\b)?"

AMOUNT_RE = re.compile(rf"(?<![\d.,])(?:{AMOUNT_TOKEN})(?!\d|\.\d)")

DEBIT_MARKER = "D"
CREDIT_MARKER = "C"


def split_amount(amount_str: str) -> tuple[Decimal, Optional[str]]:
    """Split a statement amount token into magnitude and side marker.

    Handles:
    - "1,234.56"    -> (1234.56, None)
    - "35.00-"      -> (35.00, "D")
    - "-35.00"      -> (35.00, "D")
    - "(35.00)"     -> (35.00, "D")
    - "500.00 Dr"   -> (500.00, "D")
    - "500.00Cr"    -> (500.00, "C")

    Args:
        amount_str: Amount token

    Returns:
        Tuple of non-negative Decimal and "D", "C" or None when unsigned

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    marker = None

    suffix = re.search(r"\s?(cr|dr)$", text, flags=re.IGNORECASE)
    if suffix:
        marker = CREDIT_MARKER if suffix.group(1).lower() == "cr" else DEBIT_MARKER
        text = text[: suffix.start()].strip()

    if text.startswith("(") and text.endswith(")"):
        marker = DEBIT_MARKER
        text = text[1:-1]
    if text.endswith("-"):
        marker = DEBIT_MARKER
        text = text[:-1]
    if text.startswith("-"):
        marker = DEBIT_MARKER
        text = text[1:]

    text = re.sub(r"[$€£¥R]", "", text).replace(",", "").strip()

    try:
        return Decimal(text), marker
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a signed Decimal.

    Debit markers (trailing or leading minus, parentheses, "Dr") make the
    result negative.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    magnitude, marker = split_amount(amount_str)
    return -magnitude if marker == DEBIT_MARKER else magnitude


def find_amounts(text: str) -> list[str]:
    """Return all amount tokens in a line, left to right."""
    return [match.group(0).strip() for match in AMOUNT_RE.finditer(text)]
