"""Domain model entities for ledgerkit.

These are pure data classes representing business concepts, independent of
database schema. Money is always ``Decimal``; none of these types carry
floats.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerkit.domain.standardization import StandardizedTransaction

ZERO = Decimal("0")

DEBIT_NORMAL = "D"
CREDIT_NORMAL = "C"


class TransactionType(str, Enum):
    """Final kind of a statement transaction."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    SERVICE_FEE = "SERVICE_FEE"


class AccountType(str, Enum):
    """Chart-of-accounts classification."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class MatchType(str, Enum):
    """How a mapping rule compares its value with a transaction description."""

    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    EQUALS = "EQUALS"
    REGEX = "REGEX"


@dataclass(frozen=True)
class RawLine:
    """One line of extracted statement text and its 1-based position."""

    text: str
    line_number: int


@dataclass
class RawFieldBag:
    """Fields extracted by a parser, before validation.

    Mutable while pending so that continuation lines can extend the
    description; discarded once built into a StandardizedTransaction.
    """

    description: Optional[str] = None
    date: Optional[date] = None
    debit: Optional[Decimal] = None
    credit: Optional[Decimal] = None
    service_fee: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    reference: Optional[str] = None
    parser: Optional[str] = None
    line_number: Optional[int] = None

    def append_description(self, text: str) -> None:
        """Append a continuation line to the description."""
        text = text.strip()
        if not text:
            return
        self.description = f"{self.description} {text}" if self.description else text


@dataclass(frozen=True)
class UnparsedLine:
    """A classified transaction line that no parser could turn into fields."""

    text: str
    line_number: int
    reason: str = "no parser accepted the line"


@dataclass(frozen=True)
class BuildFailure:
    """A parsed record rejected by the transaction builder."""

    line_number: Optional[int]
    field: str
    message: str


@dataclass(frozen=True)
class Company:
    """Company (ledger owner) domain entity."""

    id: int
    name: str
    registration_number: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class FiscalPeriod:
    """Fiscal period domain entity."""

    id: int
    company_id: int
    name: str
    start_date: date
    end_date: date
    is_closed: bool
    created_at: datetime

    def contains(self, day: date) -> bool:
        """Return True if the date falls inside the period (inclusive)."""
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class LedgerAccount:
    """Chart-of-accounts entry."""

    id: int
    company_id: int
    code: str
    name: str
    account_type: Optional[AccountType]
    created_at: datetime


@dataclass(frozen=True)
class BankTransaction:
    """Persisted bank statement transaction."""

    id: int
    company_id: int
    fiscal_period_id: Optional[int]
    transaction_date: date
    details: str
    debit_amount: Decimal
    credit_amount: Decimal
    balance: Optional[Decimal]
    service_fee: Decimal
    reference: Optional[str]
    transaction_type: Optional[TransactionType]
    source_name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header."""

    id: int
    company_id: int
    fiscal_period_id: int
    entry_date: date
    reference: Optional[str]
    description: str
    bank_transaction_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class JournalLine:
    """Posted journal line joined to its entry and chart-of-accounts row."""

    account_code: str
    account_name: str
    account_type: Optional[AccountType]
    debit_amount: Decimal
    credit_amount: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Per-account figures for one trial balance run.

    Monetary fields are never None; missing source data counts as zero.
    """

    account_code: str
    account_name: str
    normal_balance: str
    opening_balance: Decimal = ZERO
    period_debits: Decimal = ZERO
    period_credits: Decimal = ZERO
    closing_balance: Decimal = ZERO

    def __post_init__(self):
        for name in ("opening_balance", "period_debits", "period_credits", "closing_balance"):
            if getattr(self, name) is None:
                object.__setattr__(self, name, ZERO)

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == DEBIT_NORMAL

    @property
    def trial_balance_debit(self) -> Decimal:
        """Amount shown in the trial balance debit column."""
        if self.is_debit_normal:
            return self.closing_balance if self.closing_balance >= 0 else ZERO
        return -self.closing_balance if self.closing_balance < 0 else ZERO

    @property
    def trial_balance_credit(self) -> Decimal:
        """Amount shown in the trial balance credit column."""
        if self.is_debit_normal:
            return -self.closing_balance if self.closing_balance < 0 else ZERO
        return self.closing_balance if self.closing_balance >= 0 else ZERO


@dataclass(frozen=True)
class TrialBalanceReport:
    """Result of a trial balance run.

    ``difference`` is ``total_debit - total_credit``; ``imbalance_side``
    names the heavier column when the report does not balance.
    """

    company_id: int
    fiscal_period_id: int
    accounts: tuple[AccountBalance, ...]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def balanced(self) -> bool:
        return self.total_debit == self.total_credit

    @property
    def imbalance_side(self) -> Optional[str]:
        if self.balanced:
            return None
        return "DEBIT" if self.difference > 0 else "CREDIT"


@dataclass(frozen=True)
class DuplicateRejection:
    """A statement transaction skipped because the store already holds it."""

    transaction: "StandardizedTransaction"
    existing: Optional[BankTransaction]
    line_number: Optional[int] = None


@dataclass
class IngestResult:
    """Outcome of ingesting one statement."""

    accepted: list["StandardizedTransaction"] = field(default_factory=list)
    accepted_ids: list[int] = field(default_factory=list)
    rejected_duplicates: list[DuplicateRejection] = field(default_factory=list)
    unparsed: list[UnparsedLine] = field(default_factory=list)
    build_errors: list[BuildFailure] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        """Return counts per outcome."""
        return {
            "accepted": len(self.accepted),
            "duplicates": len(self.rejected_duplicates),
            "unparsed": len(self.unparsed),
            "build_errors": len(self.build_errors),
        }


@dataclass(frozen=True)
class MappingRule:
    """Routes bank transactions whose details match to a ledger account.

    Rules are tried highest ``priority`` first, then by name. Comparison is
    case-insensitive on the stripped description; ``REGEX`` values must
    match the whole description.
    """

    id: int
    company_id: int
    name: str
    match_type: MatchType
    match_value: str
    account_code: str
    priority: int
    is_active: bool
    created_at: datetime

    def matches(self, description: Optional[str]) -> bool:
        """Return True if the rule applies to the description."""
        if description is None or not self.is_active:
            return False
        text = description.strip().upper()
        value = self.match_value.strip().upper()
        if self.match_type == MatchType.CONTAINS:
            return value in text
        if self.match_type == MatchType.STARTS_WITH:
            return text.startswith(value)
        if self.match_type == MatchType.ENDS_WITH:
            return text.endswith(value)
        if self.match_type == MatchType.EQUALS:
            return text == value
        return re.fullmatch(self.match_value.strip(), description.strip(), re.IGNORECASE) is not None


@dataclass
class PostingResult:
    """Outcome of posting a batch of bank transactions.

    ``posted`` maps bank transaction IDs to their new journal entry IDs;
    ``skipped`` maps them to the reason they were left unposted.
    """

    posted: dict[int, int] = field(default_factory=dict)
    skipped: dict[int, str] = field(default_factory=dict)

    def summary(self) -> dict[str, int]:
        """Return counts per outcome."""
        return {"posted": len(self.posted), "skipped": len(self.skipped)}
