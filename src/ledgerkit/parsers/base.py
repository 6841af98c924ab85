"""Parser interface."""

import re
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerkit.domain.entities import RawFieldBag, RawLine
from ledgerkit.domain.errors import ParseError
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import DEBIT_MARKER, find_amounts, split_amount
from ledgerkit.utils.date_parser import LEADING_DATE_RE, parse_date

# Text that may continue a description: references, names, codes.
CONTINUATION_RE = re.compile(r"^[A-Za-z0-9*][A-Za-z0-9\s*\-().:/#+&',]*$")


class TransactionParser(ABC):
    """One statement line shape.

    Parsers are stateless; anything carried between lines lives on the
    ParsingContext. ``multiline`` parsers keep their last record pending so
    that following continuation lines can extend its description.
    """

    name: str = "parser"
    multiline: bool = False

    @abstractmethod
    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        """Return True if this parser recognises the line."""
        pass

    @abstractmethod
    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        """Extract field bags from the line.

        Returns:
            Field bags in statement order; empty when the line only extended
            the pending record

        Raises:
            ParseError: If the line is recognised but its fields are unusable
        """
        pass

    def is_continuation(self, line: RawLine, context: ParsingContext) -> bool:
        """Return True if the line extends this parser's pending record."""
        if not self.multiline or not context.continuation_open:
            return False
        if context.pending is None or context.pending.parser != self.name:
            return False
        text = line.text.strip()
        if not text or LEADING_DATE_RE.match(text):
            return False
        return bool(CONTINUATION_RE.match(text)) and not find_amounts(text)

    def _bag(self, line: RawLine, **fields) -> RawFieldBag:
        return RawFieldBag(parser=self.name, line_number=line.line_number, **fields)


def split_leading_date(text: str, context: ParsingContext) -> tuple[Optional[date], str]:
    """Strip a leading date token and parse it.

    Lines without one fall back to the statement date.

    Raises:
        ParseError: If the leading token is not a valid date
    """
    match = LEADING_DATE_RE.match(text)
    if match is None:
        return context.statement_date, text.strip()
    try:
        parsed = parse_date(match.group("date"), default_year=context.year_hint, day_first=context.day_first)
    except ValueError as e:
        raise ParseError(str(e))
    return parsed, text[match.end():].strip()


def signed_balance(token: Optional[str]) -> Optional[Decimal]:
    """Parse a running balance; a debit marker means overdrawn."""
    if not token:
        return None
    try:
        magnitude, marker = split_amount(token)
    except ValueError as e:
        raise ParseError(str(e))
    return -magnitude if marker == DEBIT_MARKER else magnitude


def magnitude_of(token: str) -> tuple[Decimal, Optional[str]]:
    """split_amount that reports failures as ParseError."""
    try:
        return split_amount(token)
    except ValueError as e:
        raise ParseError(str(e))
