"""Bank service fee lines."""

import re

from ledgerkit.domain.entities import RawFieldBag, RawLine, ZERO
from ledgerkit.parsers.base import TransactionParser, magnitude_of, split_leading_date
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import CREDIT_MARKER, find_amounts

FEE_MARKER_RE = re.compile(r"##|\bFEES?\b|\bCHARGES?\b", re.IGNORECASE)

FEE_LINE_RE = re.compile(
    r"^(?P<description>.*?[A-Za-z].*?)\s+(?P<amount>[\d,]+\.\d{2}-?(?:\s?(?:Cr|Dr|CR|DR)\b)?)"
    r"(?:\s*##)?\s*$"
)

TABLE_HEADER_RE = re.compile(r"\bservice\s+fee\b.*\b(?:debits|credits|balance|date)\b", re.IGNORECASE)


class ServiceFeeParser(TransactionParser):
    """``SERVICE FEE 35.00-``, ``MONTHLY ACCOUNT FEE ## 65.00-`` and the like."""

    name = "service_fee"

    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        text = line.text.strip()
        if not FEE_MARKER_RE.search(text) or TABLE_HEADER_RE.search(text):
            return False
        try:
            body = split_leading_date(text, context)[1]
        except ValueError:
            return False
        match = FEE_LINE_RE.match(body)
        return match is not None and not find_amounts(match.group("description"))

    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        entry_date, body = split_leading_date(line.text, context)
        match = FEE_LINE_RE.match(body)
        description = match.group("description").replace("##", " ").strip()
        amount, marker = magnitude_of(match.group("amount"))

        if marker == CREDIT_MARKER:
            # Fee refunds keep the fee type through the description keyword.
            return (self._bag(line, description=description, date=entry_date, credit=amount),)
        return (
            self._bag(
                line,
                description=description,
                date=entry_date,
                debit=ZERO,
                service_fee=amount,
            ),
        )
