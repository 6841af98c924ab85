"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConfigurationError(DomainError):
    """Configuration file or override could not be loaded."""


class StorageError(DomainError):
    """The persistence collaborator failed to read or write."""


class ParseError(DomainError):
    """A parser accepted a line but could not extract a transaction from it."""


class BuildError(ValidationError):
    """A transaction could not be built because a field is missing or invalid.

    Attributes:
        field: Name of the offending field (e.g. ``date``)
    """

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or missing_field(field))


def missing_field(field: str) -> str:
    """Return message for a missing required transaction field."""
    return f"Required field '{field}' is missing"


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def fiscal_period_not_found(fiscal_period_id: int) -> str:
    """Return message for missing fiscal period."""
    return f"Fiscal period {fiscal_period_id} not found"


def ledger_account_not_found(code: str, company_id: int) -> str:
    """Return message for missing chart-of-accounts entry."""
    return f"Account '{code}' not found for company {company_id}"


def bank_transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {transaction_id} not found"


def unbalanced_entry(total_debit, total_credit) -> str:
    """Return message for a journal entry whose sides differ."""
    return (
        f"Journal entry is not balanced: debits {total_debit} "
        f"!= credits {total_credit}"
    )


def mapping_rule_not_found(rule_id: int) -> str:
    """Return message for missing mapping rule."""
    return f"Mapping rule {rule_id} not found"
