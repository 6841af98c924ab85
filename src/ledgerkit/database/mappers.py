"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic from both the ORM schema and the
domain entities.
"""

from decimal import Decimal
from typing import Optional

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    BankTransaction as ORMBankTransaction,
    Company as ORMCompany,
    FiscalPeriod as ORMFiscalPeriod,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    LedgerAccount as ORMLedgerAccount,
    MappingRule as ORMMappingRule,
)


def _money(value) -> Decimal:
    return Decimal(value) if value is not None else domain.ZERO


def _account_type(value: Optional[str]) -> Optional[domain.AccountType]:
    return domain.AccountType(value) if value else None


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        registration_number=orm_company.registration_number,
        created_at=orm_company.created_at,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        id=orm_period.id,
        company_id=orm_period.company_id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        is_closed=bool(orm_period.is_closed),
        created_at=orm_period.created_at,
    )


def ledger_account_to_domain(orm_account: ORMLedgerAccount) -> domain.LedgerAccount:
    """Convert SQLAlchemy LedgerAccount model to domain LedgerAccount entity."""
    return domain.LedgerAccount(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=_account_type(orm_account.account_type),
        created_at=orm_account.created_at,
    )


def bank_transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    transaction_type = orm_transaction.transaction_type
    return domain.BankTransaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        fiscal_period_id=orm_transaction.fiscal_period_id,
        transaction_date=orm_transaction.transaction_date,
        details=orm_transaction.details,
        debit_amount=_money(orm_transaction.debit_amount),
        credit_amount=_money(orm_transaction.credit_amount),
        balance=Decimal(orm_transaction.balance) if orm_transaction.balance is not None else None,
        service_fee=_money(orm_transaction.service_fee),
        reference=orm_transaction.reference,
        transaction_type=domain.TransactionType(transaction_type) if transaction_type else None,
        source_name=orm_transaction.source_name,
        created_at=orm_transaction.created_at,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        fiscal_period_id=orm_entry.fiscal_period_id,
        entry_date=orm_entry.entry_date,
        reference=orm_entry.reference,
        description=orm_entry.description,
        bank_transaction_id=orm_entry.bank_transaction_id,
        created_at=orm_entry.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalEntryLine, orm_account: ORMLedgerAccount) -> domain.JournalLine:
    """Join a journal line with its account into the trial balance read model."""
    return domain.JournalLine(
        account_code=orm_account.code,
        account_name=orm_account.name,
        account_type=_account_type(orm_account.account_type),
        debit_amount=_money(orm_line.debit_amount),
        credit_amount=_money(orm_line.credit_amount),
    )


def mapping_rule_to_domain(orm_rule: ORMMappingRule) -> domain.MappingRule:
    """Convert SQLAlchemy MappingRule model to domain MappingRule entity."""
    return domain.MappingRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        name=orm_rule.name,
        match_type=domain.MatchType(orm_rule.match_type),
        match_value=orm_rule.match_value,
        account_code=orm_rule.account.code,
        priority=orm_rule.priority or 0,
        is_active=bool(orm_rule.is_active),
        created_at=orm_rule.created_at,
    )
