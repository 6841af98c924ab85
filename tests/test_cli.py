"""Tests for the command line interface."""

from datetime import date
from decimal import Decimal

from ledgerkit.cli.main import cli


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


class TestCompanyCommands:
    """Tests for company commands."""

    def test_create_and_list(self, cli_runner, temp_db):
        """Test creating and listing companies."""
        result = invoke(cli_runner, temp_db, "company", "create", "Acme Security", "--registration", "2019/1/07")
        assert result.exit_code == 0
        assert "Created company 'Acme Security' (ID: 1)" in result.output

        result = invoke(cli_runner, temp_db, "company", "list")
        assert result.exit_code == 0
        assert "Acme Security" in result.output
        assert "2019/1/07" in result.output

    def test_duplicate_company(self, cli_runner, temp_db, sample_company):
        """Test that a duplicate name exits with an error."""
        result = invoke(cli_runner, temp_db, "company", "create", "Acme Security")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestPeriodAndAccountCommands:
    """Tests for fiscal period and chart of accounts commands."""

    def test_period_lifecycle(self, cli_runner, temp_db, sample_company):
        """Test creating, listing and closing a period."""
        result = invoke(
            cli_runner, temp_db, "period", "create", "Acme Security", "FY2026",
            "--start", "2025-03-01", "--end", "2026-02-28",
        )
        assert result.exit_code == 0
        assert "Created fiscal period 'FY2026'" in result.output

        result = invoke(cli_runner, temp_db, "period", "close", "Acme Security", "FY2026")
        assert result.exit_code == 0

        result = invoke(cli_runner, temp_db, "period", "list", "Acme Security")
        assert "FY2026" in result.output
        assert "closed" in result.output

    def test_invalid_period_dates(self, cli_runner, temp_db, sample_company):
        """Test that an unparseable date exits with an error."""
        result = invoke(
            cli_runner, temp_db, "period", "create", "Acme Security", "FY", "--start", "someday", "--end", "2025-01-01"
        )
        assert result.exit_code == 1
        assert "Invalid date format" in result.output

    def test_unknown_company(self, cli_runner, temp_db):
        """Test that an unknown company exits with an error."""
        result = invoke(cli_runner, temp_db, "period", "list", "Nobody")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_account_init_add_list(self, cli_runner, temp_db, sample_company):
        """Test seeding, adding and listing accounts."""
        result = invoke(cli_runner, temp_db, "account", "init", "Acme Security")
        assert result.exit_code == 0
        assert "Created 13 accounts." in result.output

        result = invoke(cli_runner, temp_db, "account", "init", "Acme Security")
        assert "Chart of accounts already initialized." in result.output

        result = invoke(cli_runner, temp_db, "account", "add", "Acme Security", "2150", "VAT Payable")
        assert result.exit_code == 0

        result = invoke(cli_runner, temp_db, "account", "list", "Acme Security")
        assert "2150" in result.output
        assert "VAT Payable" in result.output
        assert "LIABILITY" in result.output


class TestImportCommand:
    """Tests for the statement import command."""

    def test_import_statement(self, cli_runner, temp_db, sample_company, sample_period, fixtures_dir):
        """Test importing the fixture statement."""
        statement = fixtures_dir / "statement_march.txt"
        result = invoke(
            cli_runner, temp_db, "import", str(statement), "--company", "Acme Security", "--period", "FY2026"
        )

        assert result.exit_code == 0
        assert "Import complete" in result.output
        assert "Imported: 3 transactions" in result.output
        assert "Skipped: 0 duplicates" in result.output

        result = invoke(
            cli_runner, temp_db, "import", str(statement), "--company", "Acme Security", "--period", "FY2026"
        )
        assert "Imported: 0 transactions" in result.output
        assert "Skipped: 3 duplicates" in result.output

        result = invoke(cli_runner, temp_db, "transaction", "list", "--company", "Acme Security")
        assert result.exit_code == 0
        assert "Total: 3 transactions" in result.output

    def test_import_reports_unparsed_lines(self, cli_runner, temp_db, sample_company, tmp_path):
        """Test that unparsed lines are listed."""
        statement = tmp_path / "odd.txt"
        statement.write_text("05/03/2025 MYSTERY ENTRY\n")
        result = invoke(cli_runner, temp_db, "import", str(statement), "--company", "Acme Security")

        assert result.exit_code == 0
        assert "Unparsed: 1 lines" in result.output
        assert "MYSTERY ENTRY" in result.output

    def test_import_unknown_period(self, cli_runner, temp_db, sample_company, fixtures_dir):
        """Test that an unknown period exits with an error."""
        statement = fixtures_dir / "statement_march.txt"
        result = invoke(
            cli_runner, temp_db, "import", str(statement), "--company", "Acme Security", "--period", "FY1999"
        )
        assert result.exit_code == 1
        assert "Fiscal period 'FY1999' not found" in result.output


class TestJournalAndTrialBalance:
    """Tests for journal posting and the trial balance report."""

    def test_post_and_balance(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test posting an entry and printing a balanced trial balance."""
        result = invoke(
            cli_runner, temp_db, "journal", "post",
            "--company", "Acme Security", "--period", "FY2026", "--date", "2025-03-01",
            "--description", "Capital introduced",
            "--line", "1100:1,000.00:", "--line", "3000::1000.00",
        )
        assert result.exit_code == 0
        assert "Posted journal entry 1" in result.output

        result = invoke(cli_runner, temp_db, "trial-balance", "--company", "Acme Security", "--period", "FY2026")
        assert result.exit_code == 0
        assert "1100" in result.output
        assert "1,000.00" in result.output
        assert "Balanced" in result.output

    def test_unbalanced_entry_rejected(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test that an unbalanced entry exits with an error."""
        result = invoke(
            cli_runner, temp_db, "journal", "post",
            "--company", "Acme Security", "--period", "FY2026", "--date", "2025-03-01",
            "--description", "Oops", "--line", "1100:10.00:", "--line", "3000::9.00",
        )
        assert result.exit_code == 1
        assert "not balanced" in result.output

    def test_malformed_line_option(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test that a --line without three parts is a usage error."""
        result = invoke(
            cli_runner, temp_db, "journal", "post",
            "--company", "Acme Security", "--period", "FY2026", "--date", "2025-03-01",
            "--description", "Oops", "--line", "1100", "--line", "3000::9.00",
        )
        assert result.exit_code == 2
        assert "CODE:DEBIT:CREDIT" in result.output

    def test_post_bank_transaction(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test posting an imported bank transaction."""
        transaction_id = temp_db.create_bank_transaction(
            company_id=sample_company.id,
            fiscal_period_id=sample_period.id,
            transaction_date=date(2025, 3, 31),
            details="MONTHLY MANAGEMENT FEE",
            debit_amount=Decimal("65.00"),
            credit_amount=Decimal("0"),
            service_fee=Decimal("65.00"),
        )
        result = invoke(
            cli_runner, temp_db, "journal", "post-bank", str(transaction_id),
            "--bank-account", "1100", "--contra-account", "8200",
        )
        assert result.exit_code == 0
        assert f"Posted bank transaction {transaction_id} as journal entry" in result.output

        result = invoke(
            cli_runner, temp_db, "journal", "post-bank", str(transaction_id),
            "--bank-account", "1100", "--contra-account", "8200",
        )
        assert result.exit_code == 1
        assert "already posted" in result.output

    def test_empty_trial_balance(self, cli_runner, temp_db, sample_company, sample_period):
        """Test the report for a period without activity."""
        result = invoke(cli_runner, temp_db, "trial-balance", "--company", "Acme Security", "--period", "FY2026")
        assert result.exit_code == 0
        assert "No journal activity" in result.output


def test_bad_config_file(cli_runner, temp_db, tmp_path):
    """Test that an invalid config file stops the CLI."""
    path = tmp_path / "bad.yaml"
    path.write_text("- not a mapping\n")
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--config", str(path), "company", "list"])
    assert result.exit_code == 1
    assert "mapping root" in result.output


class TestRuleCommands:
    """Tests for mapping rule commands and rule-based posting."""

    def test_add_list_delete(self, cli_runner, temp_db, sample_company, sample_chart):
        """Test managing rules from the command line."""
        result = invoke(cli_runner, temp_db, "rule", "add", "Acme Security", "Bank fees", "FEE", "8200")
        assert result.exit_code == 0
        assert "Created rule 'Bank fees' (ID: 1)" in result.output

        result = invoke(
            cli_runner, temp_db, "rule", "add", "Acme Security", "Salaries", "^SALARY .*", "8100",
            "--type", "regex", "--priority", "10",
        )
        assert result.exit_code == 0

        result = invoke(cli_runner, temp_db, "rule", "list", "Acme Security")
        assert result.exit_code == 0
        assert result.output.index("Salaries") < result.output.index("Bank fees")
        assert "-> 8200" in result.output

        result = invoke(cli_runner, temp_db, "rule", "delete", "1")
        assert result.exit_code == 0
        result = invoke(cli_runner, temp_db, "rule", "delete", "1")
        assert result.exit_code == 1
        assert "Mapping rule 1 not found" in result.output

    def test_add_rule_unknown_account(self, cli_runner, temp_db, sample_company, sample_chart):
        """Test that a rule must point at an existing account."""
        result = invoke(cli_runner, temp_db, "rule", "add", "Acme Security", "Fees", "FEE", "7777")
        assert result.exit_code == 1
        assert "7777" in result.output

    def test_post_all(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test posting imported transactions through the rules."""
        for details in ("MONTHLY MANAGEMENT FEE", "WOOLWORTHS"):
            temp_db.create_bank_transaction(
                company_id=sample_company.id,
                fiscal_period_id=sample_period.id,
                transaction_date=date(2025, 3, 31),
                details=details,
                debit_amount=Decimal("65.00"),
                credit_amount=Decimal("0"),
            )
        invoke(cli_runner, temp_db, "rule", "add", "Acme Security", "Bank fees", "FEE", "8200")

        result = invoke(
            cli_runner, temp_db, "journal", "post-all",
            "--company", "Acme Security", "--bank-account", "1100", "--period", "FY2026",
        )
        assert result.exit_code == 0
        assert "Posted: 1 transactions" in result.output
        assert "Skipped: 1 transactions" in result.output
        assert "No mapping rule matches" in result.output

    def test_post_bank_without_contra_account(self, cli_runner, temp_db, sample_company, sample_period, sample_chart):
        """Test that post-bank falls back to the rules."""
        transaction_id = temp_db.create_bank_transaction(
            company_id=sample_company.id,
            fiscal_period_id=sample_period.id,
            transaction_date=date(2025, 3, 31),
            details="WOOLWORTHS",
            debit_amount=Decimal("412.33"),
            credit_amount=Decimal("0"),
        )
        result = invoke(
            cli_runner, temp_db, "journal", "post-bank", str(transaction_id), "--bank-account", "1100"
        )
        assert result.exit_code == 1
        assert "No mapping rule matches" in result.output

        invoke(cli_runner, temp_db, "rule", "add", "Acme Security", "Groceries", "WOOLWORTHS", "8300")
        result = invoke(
            cli_runner, temp_db, "journal", "post-bank", str(transaction_id), "--bank-account", "1100"
        )
        assert result.exit_code == 0
        assert f"Posted bank transaction {transaction_id}" in result.output
