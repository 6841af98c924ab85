"""Company domain service."""

from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Company
from ledgerkit.domain.errors import ConflictError, NotFoundError, ValidationError, company_not_found


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(self, name: str, registration_number: Optional[str] = None) -> int:
        """Create a new company.

        Args:
            name: Company name
            registration_number: Optional registration number

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a company with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Company name must not be empty")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company with name '{name}' already exists")
        return self.db.create_company(name=name, registration_number=registration_number)

    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def list_companies(self) -> list[Company]:
        """List all companies, ordered by name."""
        return self.db.list_companies()

    def resolve_company(self, company: str | int) -> int:
        """Resolve a company name or ID to an ID.

        Raises:
            NotFoundError: If no company matches
        """
        if isinstance(company, int) or str(company).isdigit():
            company_id = int(company)
            if self.db.get_company(company_id) is None:
                raise NotFoundError(company_not_found(company_id))
            return company_id

        found = self.db.get_company_by_name(str(company))
        if found is None:
            raise NotFoundError(f"Company '{company}' not found")
        return found.id
