"""Fiscal period domain service."""

from datetime import date
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import FiscalPeriod
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    company_not_found,
    fiscal_period_not_found,
)


class FiscalPeriodService:
    """Service for managing fiscal periods."""

    def __init__(self, db: Database):
        """Initialize fiscal period service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period for a company.

        Args:
            company_id: Company ID
            name: Period name (e.g. "FY2025")
            start_date: First day of the period
            end_date: Last day of the period

        Returns:
            Fiscal period ID

        Raises:
            NotFoundError: If company not found
            ValidationError: If the name is blank or start is after end
            ConflictError: If the period overlaps an existing one or the name is taken
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        name = (name or "").strip()
        if not name:
            raise ValidationError("Fiscal period name must not be empty")
        if start_date > end_date:
            raise ValidationError(f"Start date {start_date} is after end date {end_date}")

        for period in self.db.list_fiscal_periods(company_id):
            if period.name == name:
                raise ConflictError(f"Fiscal period '{name}' already exists for company {company_id}")
            if start_date <= period.end_date and period.start_date <= end_date:
                raise ConflictError(
                    f"Fiscal period {start_date} to {end_date} overlaps '{period.name}' "
                    f"({period.start_date} to {period.end_date})"
                )

        return self.db.create_fiscal_period(
            company_id=company_id, name=name, start_date=start_date, end_date=end_date
        )

    def get_period(self, fiscal_period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        return self.db.get_fiscal_period(fiscal_period_id)

    def list_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List a company's fiscal periods ordered by start date."""
        return self.db.list_fiscal_periods(company_id)

    def find_period_for_date(self, company_id: int, day: date) -> Optional[FiscalPeriod]:
        """Return the company's period containing the date, if any."""
        for period in self.db.list_fiscal_periods(company_id):
            if period.contains(day):
                return period
        return None

    def close_period(self, fiscal_period_id: int) -> None:
        """Close a period to further journal posting.

        Raises:
            NotFoundError: If fiscal period not found
        """
        if self.db.get_fiscal_period(fiscal_period_id) is None:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))
        self.db.set_fiscal_period_closed(fiscal_period_id, True)
