"""Money-in lines such as credit transfers and deposits."""

import re

from ledgerkit.domain.classification import is_fee_description
from ledgerkit.domain.entities import RawFieldBag, RawLine
from ledgerkit.parsers.base import TransactionParser, magnitude_of, signed_balance, split_leading_date
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import find_amounts

CREDIT_KEYWORD_RE = re.compile(
    r"\b(?:credit\s+transfer|deposit|payment\s+from|transfer\s+from|interest|refund|reversal)\b",
    re.IGNORECASE,
)

# Description, unsigned amount, optional running balance.
CREDIT_LINE_RE = re.compile(
    r"^(?P<description>.*?[A-Za-z].*?)\s+(?P<amount>[\d,]+\.\d{2})"
    r"(?:\s*(?:Cr|CR))?"
    r"(?:\s+(?P<balance>[\d,]+\.\d{2}-?))?\s*$"
)


class CreditTransferParser(TransactionParser):
    """Credit keyword lines ending in an unsigned amount."""

    name = "credit_transfer"

    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        body = line.text.strip()
        if not CREDIT_KEYWORD_RE.search(body) or is_fee_description(body):
            return False
        try:
            body = split_leading_date(line.text, context)[1]
        except ValueError:
            return False
        match = CREDIT_LINE_RE.match(body)
        return match is not None and not find_amounts(match.group("description"))

    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        entry_date, body = split_leading_date(line.text, context)
        match = CREDIT_LINE_RE.match(body)
        amount, _ = magnitude_of(match.group("amount"))
        balance = signed_balance(match.group("balance"))
        if balance is not None:
            context.last_balance = balance
        return (
            self._bag(
                line,
                description=match.group("description").strip(),
                date=entry_date,
                credit=amount,
                balance=balance,
            ),
        )
