"""Fallback parser for plain debit/credit lines."""

import re

from ledgerkit.domain.classification import keyword_direction
from ledgerkit.domain.entities import RawFieldBag, RawLine, TransactionType
from ledgerkit.domain.errors import ParseError
from ledgerkit.parsers.base import TransactionParser, magnitude_of, signed_balance, split_leading_date
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import AMOUNT_TOKEN, CREDIT_MARKER, DEBIT_MARKER, find_amounts

TRAILING_AMOUNTS_RE = re.compile(
    rf"^(?P<description>.*?[A-Za-z].*?)\s+(?P<amounts>(?:{AMOUNT_TOKEN})(?:\s+(?:{AMOUNT_TOKEN})){{0,2}})\s*$"
)


class DebitCreditLineParser(TransactionParser):
    """``[DATE] DESCRIPTION AMOUNT [AMOUNT [AMOUNT]]``.

    One amount is the movement; two are movement and balance; three are
    debit, credit and balance. Debit markers (``-``, parentheses, ``Dr``)
    and ``Cr`` decide the side of a single movement, otherwise description
    keywords do, and debit is assumed when nothing matches.
    """

    name = "debit_credit_line"
    multiline = True

    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        try:
            body = split_leading_date(line.text, context)[1]
        except ValueError:
            return False
        return TRAILING_AMOUNTS_RE.match(body) is not None

    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        entry_date, body = split_leading_date(line.text, context)
        match = TRAILING_AMOUNTS_RE.match(body)
        if match is None:
            raise ParseError(f"No amounts found in line: {line.text!r}")

        description = match.group("description").strip()
        tokens = find_amounts(match.group("amounts"))
        debit = credit = balance = None

        if len(tokens) == 3:
            debit, _ = magnitude_of(tokens[0])
            credit, _ = magnitude_of(tokens[1])
            balance = signed_balance(tokens[2])
        elif tokens:
            amount, marker = magnitude_of(tokens[0])
            if len(tokens) == 2:
                balance = signed_balance(tokens[1])
            if self._is_credit(marker, description):
                credit = amount
            else:
                debit = amount
        else:
            raise ParseError(f"No amounts found in line: {line.text!r}")

        if balance is not None:
            context.last_balance = balance
        return (
            self._bag(
                line,
                description=description,
                date=entry_date,
                debit=debit,
                credit=credit,
                balance=balance,
            ),
        )

    @staticmethod
    def _is_credit(marker, description: str) -> bool:
        if marker == DEBIT_MARKER:
            return False
        if marker == CREDIT_MARKER:
            return True
        return keyword_direction(description) == TransactionType.CREDIT
