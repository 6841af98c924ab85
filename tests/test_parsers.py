"""Tests for the statement parsers and the parser chain."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import RawLine, UnparsedLine, ZERO
from ledgerkit.domain.errors import ParseError
from ledgerkit.parsers import (
    CreditTransferParser,
    DebitCreditLineParser,
    FeeSplitParser,
    ParserChain,
    ParsingContext,
    ServiceFeeParser,
    StandardBankTabularParser,
)


def line(text, number=1):
    return RawLine(text=text, line_number=number)


@pytest.fixture
def context():
    """Context for a March 2025 statement."""
    return ParsingContext(
        statement_date=date(2025, 3, 31),
        statement_start=date(2025, 3, 1),
        statement_end=date(2025, 3, 31),
    )


class TestParsingContext:
    """Tests for metadata capture on the context."""

    def test_observe_statement_period(self):
        """Test that a period line sets the bounds and statement date."""
        ctx = ParsingContext()
        ctx.observe("Statement from 16 February 2025 to 15 March 2025")
        assert ctx.statement_start == date(2025, 2, 16)
        assert ctx.statement_end == date(2025, 3, 15)
        assert ctx.statement_date == date(2025, 3, 15)
        assert ctx.year_hint == 2025

    def test_observe_keeps_explicit_statement_date(self):
        """Test that a period line does not replace a given statement date."""
        ctx = ParsingContext(statement_date=date(2025, 3, 20))
        ctx.observe("Statement from 16 February 2025 to 15 March 2025")
        assert ctx.statement_date == date(2025, 3, 20)

    def test_observe_account_number(self):
        """Test that account numbers are captured as digits."""
        ctx = ParsingContext()
        ctx.observe("Account Number: 20 316 375 3")
        assert ctx.account_number == "203163753"

    def test_observe_brought_forward_balance(self):
        """Test that a brought forward balance seeds last_balance."""
        ctx = ParsingContext()
        ctx.observe("BALANCE BROUGHT FORWARD 10,000.00")
        assert ctx.last_balance == Decimal("10000.00")

    def test_take_pending_closes_continuation(self):
        """Test that taking the pending record resets continuation state."""
        ctx = ParsingContext(continuation_open=True)
        assert ctx.take_pending() is None
        assert ctx.continuation_open is False


class TestServiceFeeParser:
    """Tests for bank fee lines."""

    def test_plain_service_fee(self, context):
        """Test that a signed fee line becomes a service fee record."""
        parser = ServiceFeeParser()
        fee_line = line("SERVICE FEE 35.00-")

        assert parser.can_parse(fee_line, context)
        (bag,) = parser.parse(fee_line, context)
        assert bag.description == "SERVICE FEE"
        assert bag.service_fee == Decimal("35.00")
        assert bag.debit == ZERO
        assert bag.date == date(2025, 3, 31)
        assert bag.parser == "service_fee"

    def test_marker_is_removed_from_description(self, context):
        """Test that ## markers are stripped from the description."""
        (bag,) = ServiceFeeParser().parse(line("MONTHLY ACCOUNT FEE ## 65.00-"), context)
        assert bag.description == "MONTHLY ACCOUNT FEE"
        assert bag.service_fee == Decimal("65.00")

    def test_fee_refund_is_credit(self, context):
        """Test that a Cr marked fee line is a credit."""
        (bag,) = ServiceFeeParser().parse(line("FEE REVERSAL 35.00 Cr"), context)
        assert bag.credit == Decimal("35.00")
        assert bag.service_fee is None

    def test_rejects_table_header(self, context):
        """Test that the statement column header is not a fee."""
        header = line("Details Service Fee Debits Credits Date Balance")
        assert not ServiceFeeParser().can_parse(header, context)

    def test_rejects_line_with_balance(self, context):
        """Test that amount plus balance lines are left to other parsers."""
        assert not ServiceFeeParser().can_parse(line("ATM FEE 35.00- 1,000.00"), context)


class TestCreditTransferParser:
    """Tests for money-in lines."""

    def test_credit_transfer(self, context):
        """Test a credit transfer with an unsigned amount."""
        parser = CreditTransferParser()
        credit_line = line("10/03/2025 CREDIT TRANSFER FROM JOHN DOE 1,500.00")

        assert parser.can_parse(credit_line, context)
        (bag,) = parser.parse(credit_line, context)
        assert bag.description == "CREDIT TRANSFER FROM JOHN DOE"
        assert bag.credit == Decimal("1500.00")
        assert bag.debit is None
        assert bag.date == date(2025, 3, 10)

    def test_credit_with_balance(self, context):
        """Test that a trailing balance is captured and remembered."""
        (bag,) = CreditTransferParser().parse(line("DEPOSIT CASH 200.00 Cr 1,200.00"), context)
        assert bag.credit == Decimal("200.00")
        assert bag.balance == Decimal("1200.00")
        assert context.last_balance == Decimal("1200.00")

    def test_rejects_fee_lines(self, context):
        """Test that credit keyword lines naming a fee are not credits."""
        assert not CreditTransferParser().can_parse(line("DEPOSIT FEE 5.00"), context)

    def test_rejects_signed_debit(self, context):
        """Test that a debit-marked amount is not taken as a credit."""
        assert not CreditTransferParser().can_parse(line("TRANSFER FROM SAVINGS 50.00-"), context)


class TestFeeSplitParser:
    """Tests for lines that carry a movement and its fee."""

    def test_splits_movement_and_fee(self, context):
        """Test that one line yields a debit and a service fee record."""
        parser = FeeSplitParser()
        split_line = line("05/03/2025 TRANSFER TO JOHN DOE 1,500.00- FEE: 8.90-")

        assert parser.can_parse(split_line, context)
        movement, fee = parser.parse(split_line, context)

        assert movement.description == "TRANSFER TO JOHN DOE"
        assert movement.debit == Decimal("1500.00")
        assert movement.credit is None
        assert movement.date == date(2025, 3, 5)

        assert fee.description == "FEE (TRANSFER TO JOHN DOE)"
        assert fee.service_fee == Decimal("8.90")
        assert fee.debit == ZERO
        assert fee.date == date(2025, 3, 5)

    def test_unsigned_credit_by_keyword(self, context):
        """Test that an unsigned movement uses description keywords."""
        movement, _ = FeeSplitParser().parse(line("DEPOSIT BRANCH 500.00 FEE 12.00"), context)
        assert movement.credit == Decimal("500.00")
        assert movement.debit is None


class TestStandardBankTabularParser:
    """Tests for tabular statement rows."""

    def test_compact_debit_row(self, context):
        """Test a space-aligned row with a debit amount."""
        parser = StandardBankTabularParser()
        row = line("IB PAYMENT TO ABC SUPPLIES 1,500.00- 03 05 8,500.00")

        assert parser.can_parse(row, context)
        (bag,) = parser.parse(row, context)
        assert bag.description == "IB PAYMENT TO ABC SUPPLIES"
        assert bag.debit == Decimal("1500.00")
        assert bag.credit is None
        assert bag.date == date(2025, 3, 5)
        assert bag.balance == Decimal("8500.00")
        assert context.last_balance == Decimal("8500.00")

    def test_compact_fee_row(self, context):
        """Test that ## moves the amount to the service fee."""
        (bag,) = StandardBankTabularParser().parse(
            line("MONTHLY MANAGEMENT FEE ## 65.00- 03 31 10,435.00"), context
        )
        assert bag.service_fee == Decimal("65.00")
        assert bag.debit == ZERO

    def test_compact_row_uses_balance_delta(self, context):
        """Test that a row without an amount takes it from the balance change."""
        context.last_balance = Decimal("1000.00")
        (bag,) = StandardBankTabularParser().parse(line("CASH DEPOSIT 03 12 1,250.00"), context)
        assert bag.credit == Decimal("250.00")
        assert bag.debit is None

    def test_overdrawn_balance(self, context):
        """Test that a trailing minus on the balance makes it negative."""
        (bag,) = StandardBankTabularParser().parse(
            line("DEBIT ORDER INSURANCE 300.00- 03 02 120.00-"), context
        )
        assert bag.balance == Decimal("-120.00")

    def test_tab_row(self, context):
        """Test a tab-delimited row with a fee marker."""
        (bag,) = StandardBankTabularParser().parse(
            line("MONTHLY FEE\t##\t65.00\t\t03 31\t10,435.00"), context
        )
        assert bag.description == "MONTHLY FEE"
        assert bag.service_fee == Decimal("65.00")
        assert bag.debit == ZERO
        assert bag.date == date(2025, 3, 31)
        assert bag.balance == Decimal("10435.00")

    def test_tab_row_credit(self, context):
        """Test a tab-delimited credit row."""
        (bag,) = StandardBankTabularParser().parse(
            line("CREDIT TRANSFER\t\t\t2,000.00\t03 10\t10,500.00"), context
        )
        assert bag.credit == Decimal("2000.00")
        assert bag.debit is None

    def test_compact_fee_row_uses_balance_delta(self, context):
        """Test that a fee row without an amount keeps the fee from the balance change."""
        context.last_balance = Decimal("100.00")
        (bag,) = StandardBankTabularParser().parse(line("MONTHLY FEE ## 03 31 35.00"), context)
        assert bag.service_fee == Decimal("65.00")
        assert bag.debit == ZERO
        assert bag.credit is None

    def test_tab_row_without_date_uses_statement_date(self, context):
        """Test that a blank date cell falls back to the statement date."""
        (bag,) = StandardBankTabularParser().parse(
            line("CASH DEPOSIT\t\t\t250.00\t\t1,250.00"), context
        )
        assert bag.credit == Decimal("250.00")
        assert bag.date == date(2025, 3, 31)

    @pytest.mark.parametrize(
        "text",
        [
            "05/03/2025\tATM WITHDRAWAL\t100.00-\t4,300.00",
            "ATM WITHDRAWAL\t100.00-",
            "ATM WITHDRAWAL\t\tabc\t\t03 05\t4,300.00",
            "ATM WITHDRAWAL\t\t100.00\t\tsoon\t4,300.00",
        ],
    )
    def test_rejects_other_tab_layouts(self, context, text):
        """Test that only the six-column layout is taken as a tab row."""
        assert not StandardBankTabularParser().can_parse(line(text), context)

    def test_year_resolved_across_year_end(self):
        """Test MM DD dates on a statement that straddles a year end."""
        ctx = ParsingContext(statement_start=date(2024, 12, 16), statement_end=date(2025, 1, 15))
        parser = StandardBankTabularParser()
        (december,) = parser.parse(line("POS PURCHASE 10.00- 12 28 90.00"), ctx)
        (january,) = parser.parse(line("POS PURCHASE 10.00- 01 03 80.00"), ctx)
        assert december.date == date(2024, 12, 28)
        assert january.date == date(2025, 1, 3)

    def test_invalid_month_day(self, context):
        """Test that an impossible date raises ParseError."""
        with pytest.raises(ParseError):
            StandardBankTabularParser().parse(line("POS PURCHASE 10.00- 02 30 90.00"), context)


class TestDebitCreditLineParser:
    """Tests for the fallback parser."""

    def test_movement_and_balance(self, context):
        """Test a dated line with amount and balance."""
        parser = DebitCreditLineParser()
        atm = line("10/01/2025 ATM WITHDRAWAL 100.00 4,300.00")

        assert parser.can_parse(atm, context)
        (bag,) = parser.parse(atm, context)
        assert bag.description == "ATM WITHDRAWAL"
        assert bag.debit == Decimal("100.00")
        assert bag.balance == Decimal("4300.00")
        assert bag.date == date(2025, 1, 10)

    def test_three_amounts(self, context):
        """Test debit, credit and balance columns."""
        (bag,) = DebitCreditLineParser().parse(line("2025-03-15 NET SETTLEMENT 200.00 50.00 1,000.00"), context)
        assert bag.debit == Decimal("200.00")
        assert bag.credit == Decimal("50.00")
        assert bag.balance == Decimal("1000.00")

    def test_keyword_credit(self, context):
        """Test that an unsigned salary line is a credit."""
        (bag,) = DebitCreditLineParser().parse(line("SALARY MARCH 25,000.00"), context)
        assert bag.credit == Decimal("25000.00")

    def test_unknown_defaults_to_debit(self, context):
        """Test that an unsigned line without keywords is a debit."""
        (bag,) = DebitCreditLineParser().parse(line("WOOLWORTHS 412.33"), context)
        assert bag.debit == Decimal("412.33")
        assert bag.date == date(2025, 3, 31)

    def test_rejects_line_without_amount(self, context):
        """Test that a line with no amount is not accepted."""
        assert not DebitCreditLineParser().can_parse(line("05/03/2025 GROCERIES"), context)


class TestParserChain:
    """Tests for the ordered parser chain."""

    def test_priority_order(self, context):
        """Test that the most specific parser wins."""
        chain = ParserChain()
        output = chain.parse_lines(
            [
                line("SERVICE FEE 35.00-", 1),
                line("CREDIT TRANSFER FROM JOHN DOE 1,500.00", 2),
                line("05/03/2025 TRANSFER TO JOHN DOE 1,500.00- FEE: 8.90-", 3),
                line("WOOLWORTHS 412.33", 4),
            ],
            context,
        )
        assert [bag.parser for bag in output] == [
            "service_fee",
            "credit_transfer",
            "fee_split",
            "fee_split",
            "debit_credit_line",
        ]
        assert [bag.line_number for bag in output] == [1, 2, 3, 3, 4]

    def test_continuation_extends_pending_description(self, context):
        """Test that a reference line joins the previous tabular row."""
        chain = ParserChain()
        output = chain.parse_lines(
            [
                line("IB PAYMENT TO ABC SUPPLIES 1,500.00- 03 05 8,500.00", 1),
                line("REF 778812 INV 1042", 2),
                line("CREDIT TRANSFER FROM XYZ 2,000.00 03 10 10,500.00", 3),
            ],
            context,
        )
        assert len(output) == 2
        assert output[0].description == "IB PAYMENT TO ABC SUPPLIES REF 778812 INV 1042"
        assert output[1].description == "CREDIT TRANSFER FROM XYZ"

    def test_pending_is_flushed_before_unparsed_line(self, context):
        """Test that output keeps statement order around unparsed lines."""
        chain = ParserChain()
        first = chain.feed(line("WOOLWORTHS 412.33", 1), context)
        assert first == []
        assert context.pending is not None

        # A dated line starts a new record, so it never continues the old one.
        second = chain.feed(line("05/03/2025 SOMETHING ODD", 2), context)
        assert len(second) == 2
        assert second[0].description == "WOOLWORTHS"
        assert isinstance(second[1], UnparsedLine)
        assert second[1].line_number == 2
        assert context.pending is None

    def test_tab_separated_line_reaches_fallback(self, context):
        """Test that a tab-separated line in another column order still parses."""
        (bag,) = ParserChain().parse_lines(
            [line("05/03/2025\tATM WITHDRAWAL\t100.00-\t4,300.00")], context
        )
        assert bag.parser == "debit_credit_line"
        assert bag.description == "ATM WITHDRAWAL"
        assert bag.debit == Decimal("100.00")
        assert bag.date == date(2025, 3, 5)

        (bag,) = ParserChain().parse_lines([line("ATM WITHDRAWAL\t100.00-")], context)
        assert bag.debit == Decimal("100.00")
        assert bag.service_fee is None
        assert bag.date == date(2025, 3, 31)

    def test_unparsed_line(self, context):
        """Test that a line no parser accepts is reported."""
        output = ParserChain().feed(line("12/03/2025 SOMETHING WEIRD", 7), context)
        assert output == [UnparsedLine(text="12/03/2025 SOMETHING WEIRD", line_number=7)]

    def test_offer_continuation_without_pending(self, context):
        """Test that nothing absorbs a continuation when no record is open."""
        chain = ParserChain()
        assert chain.offer_continuation(line("REF 1234"), context) is False
        assert context.continuation_open is False

    def test_finish_emits_pending(self, context):
        """Test that finishing the statement emits the last record."""
        chain = ParserChain()
        chain.feed(line("WOOLWORTHS 412.33"), context)
        (bag,) = chain.finish(context)
        assert bag.debit == Decimal("412.33")
        assert chain.finish(context) == []
