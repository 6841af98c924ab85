"""Per-run parsing state."""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from ledgerkit.domain.entities import RawFieldBag
from ledgerkit.utils.amount_parser import AMOUNT_TOKEN, split_amount, DEBIT_MARKER
from ledgerkit.utils.date_parser import parse_statement_period

logger = structlog.get_logger(__name__)

ACCOUNT_NUMBER_RE = re.compile(
    r"\baccount\s*(?:number|no\.?|#)\s*:?\s*(?P<number>\d[\d \-]{3,}\d)", re.IGNORECASE
)
BROUGHT_FORWARD_RE = re.compile(
    rf"\b(?:balance\s+brought\s+forward|opening\s+balance|brought\s+forward)\b\D*?(?P<amount>{AMOUNT_TOKEN})\s*$",
    re.IGNORECASE,
)


@dataclass
class ParsingContext:
    """Carry-over state for one statement.

    One context is created per ingestion run and never shared. Parsers read
    statement metadata from it and keep the pending (not yet emitted) record
    and the previous running balance here instead of on themselves.
    """

    statement_date: Optional[date] = None
    statement_start: Optional[date] = None
    statement_end: Optional[date] = None
    account_number: Optional[str] = None
    source_name: Optional[str] = None
    default_year: Optional[int] = None
    day_first: bool = True
    last_balance: Optional[Decimal] = None
    pending: Optional[RawFieldBag] = None
    continuation_open: bool = False

    @property
    def year_hint(self) -> Optional[int]:
        """Year used for date tokens that carry none."""
        if self.default_year:
            return self.default_year
        if self.statement_date is not None:
            return self.statement_date.year
        if self.statement_end is not None:
            return self.statement_end.year
        return None

    def observe(self, text: str) -> None:
        """Capture statement metadata from any line, transaction or not."""
        if not text:
            return

        period = parse_statement_period(text)
        if period is not None:
            self.statement_start, self.statement_end = period
            if self.statement_date is None:
                self.statement_date = self.statement_end
            logger.debug("Statement period found", start=str(self.statement_start), end=str(self.statement_end))

        if self.account_number is None:
            match = ACCOUNT_NUMBER_RE.search(text)
            if match:
                self.account_number = re.sub(r"\D", "", match.group("number"))

        match = BROUGHT_FORWARD_RE.search(text)
        if match:
            try:
                magnitude, marker = split_amount(match.group("amount"))
            except ValueError:
                return
            self.last_balance = -magnitude if marker == DEBIT_MARKER else magnitude

    def take_pending(self) -> Optional[RawFieldBag]:
        """Remove and return the pending record, closing any continuation."""
        pending, self.pending = self.pending, None
        self.continuation_open = False
        return pending
