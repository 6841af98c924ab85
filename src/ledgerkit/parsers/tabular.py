"""Standard Bank style tabular statement rows."""

import re
from decimal import Decimal
from typing import Optional

from ledgerkit.domain.entities import RawFieldBag, RawLine, ZERO
from ledgerkit.domain.errors import ParseError
from ledgerkit.parsers.base import TransactionParser, magnitude_of, signed_balance
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.utils.amount_parser import AMOUNT_TOKEN, DEBIT_MARKER
from ledgerkit.utils.date_parser import DATE_TOKEN, parse_date, resolve_month_day

SERVICE_FEE_MARKER = "##"

# DETAILS [##] [AMOUNT[-]] MM DD BALANCE[-]
COMPACT_ROW_RE = re.compile(
    r"^(?P<details>[A-Z][A-Za-z0-9 \-:/&'.*#(),+]*?)"
    r"(?:\s+(?P<fee>##))?"
    r"(?:\s+(?P<amount>[\d,]+\.\d{2}-?))?"
    r"\s+(?P<month>\d{2})\s+(?P<day>\d{2})"
    r"\s+(?P<balance>[\d,]+\.\d{2}-?)\s*$"
)

MONTH_DAY_RE = re.compile(r"^(?P<month>\d{1,2})\s+(?P<day>\d{1,2})$")
AMOUNT_CELL_RE = re.compile(rf"^(?:{AMOUNT_TOKEN})$")
DATE_CELL_RE = re.compile(rf"^(?:{DATE_TOKEN})$", re.IGNORECASE)

# details, service fee, debits, credits, date, balance
TAB_COLUMNS = ("details", "service_fee", "debits", "credits", "date", "balance")


class StandardBankTabularParser(TransactionParser):
    """Column layout rows: details, service fee, debits, credits, date, balance.

    Two physical shapes are accepted: tab-delimited exports and the
    space-aligned layout printed on PDF statements. A trailing ``-`` on the
    amount marks a debit and on the balance an overdrawn account; ``##``
    marks a service fee. Rows without a movement amount take it from the
    change against the previous row's balance.
    """

    name = "standard_bank_tabular"
    multiline = True

    def can_parse(self, line: RawLine, context: ParsingContext) -> bool:
        text = line.text
        if self._tab_columns(text) is not None:
            return True
        if COMPACT_ROW_RE.match(text.strip()):
            return True
        return self.is_continuation(line, context)

    def parse(self, line: RawLine, context: ParsingContext) -> tuple[RawFieldBag, ...]:
        columns = self._tab_columns(line.text)
        if columns is not None:
            return (self._parse_tab_row(line, columns, context),)

        match = COMPACT_ROW_RE.match(line.text.strip())
        if match is not None:
            return (self._parse_compact_row(line, match, context),)

        if self.is_continuation(line, context):
            context.pending.append_description(line.text)
            return ()

        raise ParseError(f"Not a tabular statement row: {line.text!r}")

    @classmethod
    def _tab_columns(cls, text: str) -> Optional[dict[str, str]]:
        if "\t" not in text:
            return None
        cells = [cell.strip() for cell in text.rstrip("\r\n").split("\t")]
        # Balance may be dropped from the end; every other column is required.
        if not len(TAB_COLUMNS) - 1 <= len(cells) <= len(TAB_COLUMNS) or not cells[0]:
            return None
        cells += [""] * (len(TAB_COLUMNS) - len(cells))
        columns = dict(zip(TAB_COLUMNS, cells))

        fee = columns["service_fee"]
        if fee and fee != SERVICE_FEE_MARKER and not cls._is_amount(fee):
            return None
        for name in ("debits", "credits", "balance"):
            if columns[name] and not cls._is_amount(columns[name]):
                return None
        if columns["date"] and not (
            MONTH_DAY_RE.match(columns["date"]) or DATE_CELL_RE.match(columns["date"])
        ):
            return None
        if not (columns["debits"] or columns["credits"] or columns["balance"] or cls._is_amount(fee)):
            return None
        return columns

    @staticmethod
    def _is_amount(cell: str) -> bool:
        return AMOUNT_CELL_RE.match(cell) is not None

    def _parse_tab_row(self, line: RawLine, columns: dict[str, str], context: ParsingContext) -> RawFieldBag:
        debit = credit = service_fee = None
        fee_marked = columns["service_fee"] == SERVICE_FEE_MARKER

        if columns["service_fee"] and not fee_marked:
            service_fee, _ = magnitude_of(columns["service_fee"])
        if columns["debits"]:
            debit, _ = magnitude_of(columns["debits"])
        if columns["credits"]:
            credit, marker = magnitude_of(columns["credits"])
            if marker == DEBIT_MARKER:
                debit, credit = (debit or ZERO) + credit, None

        balance = signed_balance(columns["balance"])
        if debit is None and credit is None and service_fee is None:
            debit, credit = self._movement_from_balance(balance, context)
        if fee_marked and debit is not None:
            service_fee, debit = debit, ZERO
        self._remember_balance(balance, context)

        return self._bag(
            line,
            description=columns["details"],
            date=self._row_date(columns["date"], context),
            debit=debit,
            credit=credit,
            service_fee=service_fee,
            balance=balance,
        )

    def _parse_compact_row(self, line: RawLine, match: re.Match, context: ParsingContext) -> RawFieldBag:
        debit = credit = service_fee = None
        balance = signed_balance(match.group("balance"))

        if match.group("amount"):
            amount, marker = magnitude_of(match.group("amount"))
            if match.group("fee"):
                service_fee, debit = amount, ZERO
            elif marker == DEBIT_MARKER:
                debit = amount
            else:
                credit = amount
        else:
            debit, credit = self._movement_from_balance(balance, context)
            if match.group("fee") and debit is not None:
                service_fee, debit = debit, ZERO
        self._remember_balance(balance, context)

        entry_date = self._month_day(int(match.group("month")), int(match.group("day")), context)
        return self._bag(
            line,
            description=match.group("details"),
            date=entry_date,
            debit=debit,
            credit=credit,
            service_fee=service_fee,
            balance=balance,
        )

    @staticmethod
    def _movement_from_balance(
        balance: Optional[Decimal], context: ParsingContext
    ) -> tuple[Optional[Decimal], Optional[Decimal]]:
        if balance is None or context.last_balance is None:
            return None, None
        delta = balance - context.last_balance
        if delta < 0:
            return -delta, None
        return None, delta

    @staticmethod
    def _remember_balance(balance: Optional[Decimal], context: ParsingContext) -> None:
        if balance is not None:
            context.last_balance = balance

    def _row_date(self, token: str, context: ParsingContext):
        if not token:
            return context.statement_date
        match = MONTH_DAY_RE.match(token)
        if match:
            return self._month_day(int(match.group("month")), int(match.group("day")), context)
        try:
            return parse_date(token, default_year=context.year_hint, day_first=context.day_first)
        except ValueError as e:
            raise ParseError(str(e))

    @staticmethod
    def _month_day(month: int, day: int, context: ParsingContext):
        try:
            return resolve_month_day(
                month,
                day,
                period_start=context.statement_start,
                period_end=context.statement_end,
                fallback_year=context.year_hint,
            )
        except ValueError as e:
            raise ParseError(f"Invalid statement date {month:02d} {day:02d}: {e}")
