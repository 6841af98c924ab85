"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from datetime import date
from pathlib import Path
import pytest

from ledgerkit.config import LedgerConfig
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.account import ChartOfAccountsService
from ledgerkit.domain.company import CompanyService
from ledgerkit.domain.fiscal_period import FiscalPeriodService
from ledgerkit.domain.ingestion import StatementIngestionService
from ledgerkit.domain.journal import JournalService
from ledgerkit.domain.mapping_rules import MappingRuleService
from ledgerkit.domain.trial_balance import TrialBalanceService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def config():
    """Default configuration."""
    return LedgerConfig()


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def period_service(temp_db):
    """Create a FiscalPeriodService with a temporary database."""
    return FiscalPeriodService(temp_db)


@pytest.fixture
def chart_service(temp_db, config):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db, config)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def mapping_rule_service(temp_db):
    """Create a MappingRuleService with a temporary database."""
    return MappingRuleService(temp_db)


@pytest.fixture
def ingestion_service(temp_db, config):
    """Create a StatementIngestionService with a temporary database."""
    return StatementIngestionService(temp_db, config)


@pytest.fixture
def trial_balance_service(temp_db, config):
    """Create a TrialBalanceService with a temporary database."""
    return TrialBalanceService(temp_db, config)


@pytest.fixture
def sample_company(company_service):
    """Create a sample company for testing."""
    company_id = company_service.create_company(name="Acme Security", registration_number="2019/123456/07")
    return company_service.get_company(company_id)


@pytest.fixture
def sample_period(period_service, sample_company):
    """Create a fiscal period covering March 2025 to February 2026."""
    period_id = period_service.create_period(
        company_id=sample_company.id,
        name="FY2026",
        start_date=date(2025, 3, 1),
        end_date=date(2026, 2, 28),
    )
    return period_service.get_period(period_id)


@pytest.fixture
def prior_period(period_service, sample_company):
    """Create the fiscal period before sample_period."""
    period_id = period_service.create_period(
        company_id=sample_company.id,
        name="FY2025",
        start_date=date(2024, 3, 1),
        end_date=date(2025, 2, 28),
    )
    return period_service.get_period(period_id)


@pytest.fixture
def sample_chart(chart_service, sample_company):
    """Seed the default chart of accounts for the sample company."""
    chart_service.initialize_default_chart(sample_company.id)
    return {acc.code: acc for acc in chart_service.list_accounts(sample_company.id)}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
