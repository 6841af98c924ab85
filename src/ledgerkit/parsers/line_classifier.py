"""Decides whether a raw statement line is a transaction candidate."""

import re

from ledgerkit.utils.amount_parser import AMOUNT_RE
from ledgerkit.utils.date_parser import DATE_RE

NOISE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        # Page footers and bare page numbers
        r"^\s*page\s+\d+(?:\s*(?:of|/)\s*\d+)?\s*$",
        r"^\s*\d{1,4}\s*$",
        r"^\s*-?\s*\d+\s*-?\s*$",
        # Column headers
        r"^(?!.*\d\.\d{2}\b)\s*(?:date|details|description|transaction|particulars)\b.*\b(?:debits?|credits?|amount|balance)\s*$",
        r"^\s*details\s+service\s+fee\b",
        r"^\s*debits\s+credits\b",
        # Statement banners
        r"^\s*(?:bank\s+statement|statement\s+of\s+account|tax\s+invoice)\b",
        # Account, branch and period header fields
        r"^\s*account\s*(?:number|no\.?|#|holder|type|name)\b",
        r"^\s*branch\b",
        r"^\s*statement\s+(?:period|date|from|no\.?|number|frequency)\b",
        r"^\s*vat\s+reg",
        # Balance and total lines
        r"\b(?:opening|closing|month-end)\s+balance\b",
        r"\bbalance\s+(?:brought|carried)\s+forward\b",
        r"^\s*(?:brought|carried)\s+forward\b",
        r"^\s*(?:sub-?)?totals?\b",
        # Continuation markers
        r"^\s*\(?continued(?:\s+on\s+next\s+page)?\)?\s*\.*$",
        r"\bcontinued\s+on\s+(?:the\s+)?next\s+page\b",
    )
)

TRANSACTION_KEYWORDS = (
    "fee",
    "charge",
    "transfer",
    "payment",
    "deposit",
    "withdrawal",
    "debit",
    "credit",
    "atm",
    "eft",
    "salary",
    "interest",
    "dividend",
)

KEYWORD_RE = re.compile(r"\b(?:" + "|".join(TRANSACTION_KEYWORDS) + r")", re.IGNORECASE)


class LineClassifier:
    """Permissive line filter.

    Only structural noise is rejected; anything else carrying a date token,
    an amount or a transaction keyword goes on to the parser chain, which
    rejects shapes it does not recognise.
    """

    def __init__(self, noise_patterns=NOISE_PATTERNS, keyword_pattern=KEYWORD_RE):
        self.noise_patterns = noise_patterns
        self.keyword_pattern = keyword_pattern

    def is_noise(self, line: str) -> bool:
        """Return True for blank lines and known header/footer shapes."""
        if line is None or not line.strip():
            return True
        return any(pattern.search(line) for pattern in self.noise_patterns)

    def is_transaction(self, line: str) -> bool:
        """Return True if the line may hold a transaction."""
        if self.is_noise(line):
            return False
        return bool(
            DATE_RE.search(line)
            or AMOUNT_RE.search(line)
            or self.keyword_pattern.search(line)
        )
