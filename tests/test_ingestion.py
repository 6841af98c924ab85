"""Tests for statement ingestion."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import TransactionType
from ledgerkit.domain.errors import NotFoundError
from ledgerkit.domain.ingestion import parse_statement
from ledgerkit.parsers import ParsingContext


@pytest.fixture
def statement_lines(fixtures_dir):
    return (fixtures_dir / "statement_march.txt").read_text().splitlines()


class TestParseStatement:
    """Tests for parsing without a store."""

    def test_fixture_statement(self, statement_lines):
        """Test that headers are skipped and continuation lines are joined."""
        context = ParsingContext()
        bags, unparsed = parse_statement(statement_lines, context)

        assert unparsed == []
        assert [bag.parser for bag in bags] == ["standard_bank_tabular"] * 3
        assert bags[0].description == "IB PAYMENT TO ABC SUPPLIES REF 778812 INV 1042"
        assert bags[0].date == date(2025, 3, 5)
        assert bags[0].line_number == 6
        assert bags[2].service_fee == Decimal("65.00")

        assert context.account_number == "203163753"
        assert context.statement_start == date(2025, 3, 1)
        assert context.statement_end == date(2025, 3, 31)

    def test_iso_dated_line(self):
        """Test that ISO dates keep month and day in place."""
        bags, unparsed = parse_statement(
            ["2025-01-10 ATM WITHDRAWAL 100.00- 4,300.00"], ParsingContext()
        )
        assert unparsed == []
        assert bags[0].date == date(2025, 1, 10)
        assert bags[0].debit == Decimal("100.00")

    def test_unparsed_lines_reported(self):
        """Test that candidate lines no parser accepts are returned."""
        bags, unparsed = parse_statement(
            ["SERVICE FEE 35.00-", "05/03/2025 MYSTERY ENTRY"],
            ParsingContext(statement_date=date(2025, 3, 31)),
        )
        assert len(bags) == 1
        assert [u.line_number for u in unparsed] == [2]

    def test_noise_closes_continuation(self):
        """Test that a reference after a page break does not join the previous record."""
        bags, _ = parse_statement(
            ["WOOLWORTHS 412.33", "Page 1 of 2", "REF 1234"],
            ParsingContext(statement_date=date(2025, 3, 31)),
        )
        assert [bag.description for bag in bags] == ["WOOLWORTHS"]


class TestStatementIngestionService:
    """Tests for StatementIngestionService."""

    def test_ingest_fixture(self, ingestion_service, sample_company, sample_period, statement_lines):
        """Test that the fixture imports three transactions."""
        result = ingestion_service.ingest(
            statement_lines,
            company_id=sample_company.id,
            fiscal_period_id=sample_period.id,
            source_name="statement_march.txt",
        )

        assert result.summary() == {"accepted": 3, "duplicates": 0, "unparsed": 0, "build_errors": 0}
        assert [t.type for t in result.accepted] == [
            TransactionType.DEBIT,
            TransactionType.CREDIT,
            TransactionType.SERVICE_FEE,
        ]

        stored = ingestion_service.list_transactions(sample_company.id, sample_period.id)
        assert len(stored) == 3
        payment, credit, fee = stored
        assert payment.details == "IB PAYMENT TO ABC SUPPLIES REF 778812 INV 1042"
        assert payment.debit_amount == Decimal("1500.00")
        assert credit.credit_amount == Decimal("2000.00")
        assert fee.debit_amount == Decimal("65.00")
        assert fee.service_fee == Decimal("65.00")
        assert fee.transaction_type == TransactionType.SERVICE_FEE
        assert fee.source_name == "statement_march.txt"

    def test_reimport_rejects_duplicates(self, ingestion_service, sample_company, sample_period, statement_lines):
        """Test that importing the same statement twice stores nothing new."""
        ingestion_service.ingest(statement_lines, sample_company.id, sample_period.id)
        result = ingestion_service.ingest(statement_lines, sample_company.id, sample_period.id)

        assert result.accepted == []
        assert len(result.rejected_duplicates) == 3
        assert result.rejected_duplicates[0].existing is not None
        assert len(ingestion_service.list_transactions(sample_company.id)) == 3

    def test_repeat_within_one_statement(self, ingestion_service, sample_company):
        """Test that an exact repeat later in the same statement is a duplicate."""
        lines = ["10/01/2025 ATM WITHDRAWAL 100.00 4,300.00", "10/01/2025 ATM WITHDRAWAL 100.00 4,300.00"]
        result = ingestion_service.ingest(lines, sample_company.id)

        assert len(result.accepted) == 1
        assert len(result.rejected_duplicates) == 1
        assert result.rejected_duplicates[0].line_number == 2

    def test_balance_distinguishes_repeats(self, ingestion_service, sample_company):
        """Test that repeats with different running balances are both kept."""
        lines = ["10/01/2025 ATM WITHDRAWAL 100.00 4,300.00", "10/01/2025 ATM WITHDRAWAL 100.00 4,200.00"]
        result = ingestion_service.ingest(lines, sample_company.id)
        assert len(result.accepted) == 2

    def test_date_outside_period(self, ingestion_service, sample_company, sample_period):
        """Test that transactions outside the fiscal period are rejected."""
        result = ingestion_service.ingest(
            ["10/01/2025 ATM WITHDRAWAL 100.00 4,300.00"], sample_company.id, sample_period.id
        )
        assert result.accepted == []
        assert result.build_errors[0].field == "date"
        assert "outside fiscal period" in result.build_errors[0].message

    def test_missing_date_is_build_error(self, ingestion_service, sample_company):
        """Test that an undated line without a statement date is rejected."""
        result = ingestion_service.ingest(["SERVICE FEE 35.00-"], sample_company.id)
        assert result.accepted == []
        assert result.build_errors[0].field == "date"
        assert result.build_errors[0].line_number == 1

    def test_statement_date_fills_undated_lines(self, ingestion_service, sample_company):
        """Test that undated lines take the statement date."""
        result = ingestion_service.ingest(
            ["SERVICE FEE 35.00-"], sample_company.id, statement_date=date(2025, 3, 31)
        )
        (fee,) = result.accepted
        assert fee.date == date(2025, 3, 31)
        assert fee.amount == Decimal("35.00")

    def test_unknown_company(self, ingestion_service):
        """Test that an unknown company raises NotFoundError."""
        with pytest.raises(NotFoundError):
            ingestion_service.ingest(["SERVICE FEE 35.00-"], 999)

    def test_period_of_other_company(self, ingestion_service, company_service, sample_period):
        """Test that a period must belong to the importing company."""
        other_id = company_service.create_company(name="Other Co")
        with pytest.raises(NotFoundError):
            ingestion_service.ingest(["SERVICE FEE 35.00-"], other_id, sample_period.id)

    def test_list_transactions_unknown_company(self, ingestion_service):
        """Test listing for an unknown company."""
        with pytest.raises(NotFoundError):
            ingestion_service.list_transactions(999)
