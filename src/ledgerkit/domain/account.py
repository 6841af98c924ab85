"""Chart of accounts domain service."""

from typing import Optional

from ledgerkit.config import LedgerConfig
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import AccountType, LedgerAccount
from ledgerkit.domain.errors import (
    ConflictError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
    company_not_found,
)

DEFAULT_CHART: tuple[tuple[str, str, AccountType], ...] = (
    ("1000", "Petty Cash", AccountType.ASSET),
    ("1100", "Bank Account", AccountType.ASSET),
    ("1200", "Accounts Receivable", AccountType.ASSET),
    ("2100", "Loans from Directors", AccountType.LIABILITY),
    ("2200", "Accounts Payable", AccountType.LIABILITY),
    ("3000", "Owner's Capital", AccountType.EQUITY),
    ("3100", "Retained Earnings", AccountType.EQUITY),
    ("4000", "Sales Revenue", AccountType.REVENUE),
    ("4900", "Interest Received", AccountType.REVENUE),
    ("8100", "Salaries and Wages", AccountType.EXPENSE),
    ("8200", "Bank Charges", AccountType.EXPENSE),
    ("8300", "Office Expenses", AccountType.EXPENSE),
    ("8999", "Other Expenses", AccountType.EXPENSE),
)


class ChartOfAccountsService:
    """Service for managing a company's chart of accounts."""

    def __init__(self, db: Database, config: Optional[LedgerConfig] = None):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
            config: Loaded configuration (account type prefixes)
        """
        self.db = db
        self.config = config or LedgerConfig()

    def create_account(
        self,
        company_id: int,
        code: str,
        name: str,
        account_type: Optional[AccountType | str] = None,
    ) -> int:
        """Create a ledger account.

        Args:
            company_id: Company ID
            code: Account code, unique per company (e.g. "1100")
            name: Account name
            account_type: Optional explicit type; derived from the code if omitted

        Returns:
            Ledger account ID

        Raises:
            NotFoundError: If company not found
            ValidationError: If code, name or type is invalid
            ConflictError: If the code already exists for the company
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("Account code must not be empty")
        if not name:
            raise ValidationError("Account name must not be empty")

        if account_type is not None and not isinstance(account_type, AccountType):
            try:
                account_type = AccountType(str(account_type).upper())
            except ValueError:
                valid = ", ".join(t.value for t in AccountType)
                raise ValidationError(f"Invalid account type '{account_type}'. Must be one of: {valid}")

        # Either the tag or the code prefix has to resolve to a type.
        try:
            self.config.sign_convention.account_type_for(code, account_type)
        except ConfigurationError as e:
            raise ValidationError(str(e))

        if self.db.get_ledger_account(company_id, code) is not None:
            raise ConflictError(f"Account '{code}' already exists for company {company_id}")

        return self.db.create_ledger_account(
            company_id=company_id, code=code, name=name, account_type=account_type
        )

    def get_account(self, company_id: int, code: str) -> Optional[LedgerAccount]:
        """Get account by code."""
        return self.db.get_ledger_account(company_id, code)

    def list_accounts(self, company_id: int) -> list[LedgerAccount]:
        """List a company's accounts ordered by code."""
        return self.db.list_ledger_accounts(company_id)

    def initialize_default_chart(self, company_id: int) -> int:
        """Seed the standard chart, skipping codes that already exist.

        Returns:
            Number of accounts created
        """
        created = 0
        for code, name, account_type in DEFAULT_CHART:
            if self.db.get_ledger_account(company_id, code) is not None:
                continue
            self.create_account(company_id, code, name, account_type)
            created += 1
        return created
