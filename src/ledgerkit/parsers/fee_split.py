"""Lines that carry a movement and its bank fee together."""

import re

from ledgerkit.domain.classification import keyword_direction
from ledgerkit.domain.entities import RawFieldBag, RawLine, TransactionType, ZERO
from ledgerkit.parsers.base import TransactionParser, magnitude_of, split_leading_date
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import DEBIT_MARKER, CREDIT_MARKER

FEE_SPLIT_RE = re.compile(
    r"^(?P<description>.*?[A-Za-z].*?)\s+(?P<amount>[\d,]+\.\d{2}-?)"
    r"\s+(?P<fee_label>FEE\b[^\d]*?)\s*(?P<fee>[\d,]+\.\d{2}-?)\s*$",
    re.IGNORECASE,
)


class FeeSplitParser(TransactionParser):
    """``TRANSFER TO JOHN DOE 1,500.00- FEE: 8.90-`` becomes two records.

    The movement keeps the line's description; the fee is emitted as its own
    service fee record so it can be posted separately.
    """

    name = "fee_split"

    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        return FEE_SPLIT_RE.match(self._body(line, context)) is not None

    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        entry_date, body = split_leading_date(line.text, context)
        match = FEE_SPLIT_RE.match(body)

        description = match.group("description").strip()
        amount, marker = magnitude_of(match.group("amount"))
        if marker == DEBIT_MARKER:
            is_credit = False
        elif marker == CREDIT_MARKER:
            is_credit = True
        else:
            is_credit = keyword_direction(description) == TransactionType.CREDIT

        movement = self._bag(
            line,
            description=description,
            date=entry_date,
            debit=None if is_credit else amount,
            credit=amount if is_credit else None,
        )

        fee_amount, _ = magnitude_of(match.group("fee"))
        fee_label = match.group("fee_label").strip().rstrip(":").strip()
        fee = self._bag(
            line,
            description=f"{fee_label} ({description})",
            date=entry_date,
            debit=ZERO,
            service_fee=fee_amount,
        )
        return movement, fee

    @staticmethod
    def _body(line: RawLine, context: ParsingContext) -> str:
        try:
            return split_leading_date(line.text, context)[1]
        except ValueError:
            return line.text.strip()
