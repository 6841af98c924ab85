"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    AccountType,
    BankTransaction,
    Company,
    FiscalPeriod,
    JournalEntry,
    JournalLine,
    LedgerAccount,
    MappingRule,
    MatchType,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for ledgerkit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def create_company(self, name: str, registration_number: Optional[str] = None) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # Fiscal period operations
    @abstractmethod
    def create_fiscal_period(
        self, company_id: int, name: str, start_date: date, end_date: date
    ) -> int:
        """Create a fiscal period. Returns fiscal period ID."""
        pass

    @abstractmethod
    def get_fiscal_period(self, fiscal_period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        pass

    @abstractmethod
    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List a company's fiscal periods ordered by start date."""
        pass

    @abstractmethod
    def set_fiscal_period_closed(self, fiscal_period_id: int, is_closed: bool) -> None:
        """Open or close a fiscal period."""
        pass

    # Chart of accounts operations
    @abstractmethod
    def create_ledger_account(
        self,
        company_id: int,
        code: str,
        name: str,
        account_type: Optional[AccountType] = None,
    ) -> int:
        """Create a ledger account. Returns account ID."""
        pass

    @abstractmethod
    def get_ledger_account(self, company_id: int, code: str) -> Optional[LedgerAccount]:
        """Get ledger account by company and code."""
        pass

    @abstractmethod
    def list_ledger_accounts(self, company_id: int) -> list[LedgerAccount]:
        """List a company's ledger accounts ordered by code."""
        pass

    # Mapping rule operations
    @abstractmethod
    def create_mapping_rule(
        self,
        company_id: int,
        name: str,
        match_type: MatchType,
        match_value: str,
        account_id: int,
        priority: int = 0,
        is_active: bool = True,
    ) -> int:
        """Create a mapping rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_mapping_rule(self, rule_id: int) -> Optional[MappingRule]:
        """Get mapping rule by ID."""
        pass

    @abstractmethod
    def list_mapping_rules(self, company_id: int) -> list[MappingRule]:
        """List a company's mapping rules, highest priority first, then by name."""
        pass

    @abstractmethod
    def delete_mapping_rule(self, rule_id: int) -> None:
        """Delete a mapping rule."""
        pass

    # Bank transaction operations
    @abstractmethod
    def create_bank_transaction(
        self,
        company_id: int,
        transaction_date: date,
        details: str,
        debit_amount: Decimal,
        credit_amount: Decimal,
        balance: Optional[Decimal] = None,
        fiscal_period_id: Optional[int] = None,
        service_fee: Decimal = Decimal("0"),
        reference: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        source_name: Optional[str] = None,
    ) -> int:
        """Insert and commit a bank transaction. Returns transaction ID.

        Raises:
            StorageError: If the store fails
        """
        pass

    @abstractmethod
    def find_bank_transaction(
        self,
        company_id: int,
        transaction_date: date,
        debit_amount: Optional[Decimal],
        credit_amount: Optional[Decimal],
        description: str,
        balance: Optional[Decimal],
    ) -> Optional[BankTransaction]:
        """Find a stored transaction matching every key field.

        Missing amounts count as zero; descriptions compare after whitespace
        collapsing and case folding.

        Raises:
            StorageError: If the store fails
        """
        pass

    def bank_transaction_exists(
        self,
        company_id: int,
        transaction_date: date,
        debit_amount: Optional[Decimal],
        credit_amount: Optional[Decimal],
        description: str,
        balance: Optional[Decimal],
    ) -> bool:
        """Check if a matching bank transaction is stored."""
        return (
            self.find_bank_transaction(
                company_id, transaction_date, debit_amount, credit_amount, description, balance
            )
            is not None
        )

    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list[BankTransaction]:
        """List bank transactions in date order, optionally for one period."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        entry_date: date,
        description: str,
        lines: Sequence[tuple[int, Decimal, Decimal]],
        reference: Optional[str] = None,
        bank_transaction_id: Optional[int] = None,
    ) -> int:
        """Insert an entry and its (account_id, debit, credit) lines atomically.

        Raises:
            StorageError: If the store fails; nothing is written
        """
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def journal_entry_for_bank_transaction(self, bank_transaction_id: int) -> Optional[JournalEntry]:
        """Get the journal entry recording a bank transaction, if posted."""
        pass

    @abstractmethod
    def journal_lines_for_period(self, company_id: int, fiscal_period_id: int) -> list[JournalLine]:
        """Journal lines posted to a period, joined to their accounts."""
        pass

    @abstractmethod
    def journal_lines_before_period(self, company_id: int, fiscal_period_id: int) -> list[JournalLine]:
        """Journal lines of all the company's periods starting before the given one."""
        pass
