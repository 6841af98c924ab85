"""Journal posting domain service."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence

import structlog

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import JournalEntry, PostingResult, ZERO
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    bank_transaction_not_found,
    company_not_found,
    fiscal_period_not_found,
    ledger_account_not_found,
    unbalanced_entry,
)
from ledgerkit.domain.mapping_rules import MappingRuleService

logger = structlog.get_logger(__name__)

JournalLineInput = tuple[str, Decimal | str | int | None, Decimal | str | int | None]


def _amount(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount '{value}'")
    return amount


class JournalService:
    """Service for posting balanced journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def post_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        entry_date: date,
        description: str,
        lines: Iterable[JournalLineInput],
        reference: Optional[str] = None,
        bank_transaction_id: Optional[int] = None,
    ) -> int:
        """Post a journal entry.

        Args:
            company_id: Company ID
            fiscal_period_id: Open fiscal period containing entry_date
            entry_date: Entry date
            description: Entry description
            lines: (account_code, debit, credit) tuples; each line has exactly
                one positive side
            reference: Optional reference
            bank_transaction_id: Bank transaction the entry records, if any

        Returns:
            Journal entry ID

        Raises:
            NotFoundError: If company, period or an account is not found
            ValidationError: If the lines are invalid or do not balance
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))
        if period.is_closed:
            raise ValidationError(f"Fiscal period '{period.name}' is closed")
        if not period.contains(entry_date):
            raise ValidationError(f"Entry date {entry_date} is outside fiscal period '{period.name}'")

        description = (description or "").strip()
        if not description:
            raise ValidationError("Journal entry description must not be empty")

        resolved = self._resolve_lines(company_id, list(lines))

        entry_id = self.db.create_journal_entry(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            entry_date=entry_date,
            description=description,
            reference=reference,
            bank_transaction_id=bank_transaction_id,
            lines=resolved,
        )
        logger.info(
            "Journal entry posted",
            entry_id=entry_id,
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            lines=len(resolved),
        )
        return entry_id

    def _resolve_lines(
        self, company_id: int, lines: Sequence[JournalLineInput]
    ) -> list[tuple[int, Decimal, Decimal]]:
        if len(lines) < 2:
            raise ValidationError("A journal entry needs at least two lines")

        resolved = []
        total_debit = total_credit = ZERO
        for code, debit, credit in lines:
            debit, credit = _amount(debit), _amount(credit)
            if debit < 0 or credit < 0:
                raise ValidationError(f"Line for account '{code}' has a negative amount")
            if (debit > 0) == (credit > 0):
                raise ValidationError(
                    f"Line for account '{code}' must have exactly one of debit or credit"
                )
            account = self.db.get_ledger_account(company_id, code)
            if account is None:
                raise NotFoundError(ledger_account_not_found(code, company_id))
            resolved.append((account.id, debit, credit))
            total_debit += debit
            total_credit += credit

        if total_debit != total_credit:
            raise ValidationError(unbalanced_entry(total_debit, total_credit))
        return resolved

    def post_bank_transaction(
        self,
        bank_transaction_id: int,
        bank_account_code: str,
        contra_account_code: Optional[str] = None,
        fiscal_period_id: Optional[int] = None,
    ) -> int:
        """Record a stored bank transaction as a two-line entry.

        Money in debits the bank account and credits the contra account;
        money out and fees do the reverse.

        Args:
            bank_transaction_id: Persisted bank transaction ID
            bank_account_code: Ledger account for the bank
            contra_account_code: Offsetting ledger account; taken from the
                first matching mapping rule when omitted
            fiscal_period_id: Period to post into; defaults to the transaction's
                own period, else the period containing its date

        Returns:
            Journal entry ID

        Raises:
            NotFoundError: If the transaction or a period is not found, or no
                mapping rule matches when no contra account is given
            ConflictError: If the transaction is already posted
            ValidationError: If the transaction has no net movement
        """
        transaction = self.db.get_bank_transaction(bank_transaction_id)
        if transaction is None:
            raise NotFoundError(bank_transaction_not_found(bank_transaction_id))
        if self.db.journal_entry_for_bank_transaction(bank_transaction_id) is not None:
            raise ConflictError(f"Bank transaction {bank_transaction_id} is already posted")

        period_id = fiscal_period_id or transaction.fiscal_period_id
        if period_id is None:
            for period in self.db.list_fiscal_periods(transaction.company_id):
                if period.contains(transaction.transaction_date):
                    period_id = period.id
                    break
        if period_id is None:
            raise NotFoundError(
                f"No fiscal period contains {transaction.transaction_date} "
                f"for company {transaction.company_id}"
            )

        if contra_account_code is None:
            account = MappingRuleService(self.db).match_account(transaction)
            if account is None:
                raise NotFoundError(
                    f"No mapping rule matches bank transaction {bank_transaction_id} "
                    f"'{transaction.details}'"
                )
            contra_account_code = account.code

        net = transaction.credit_amount - transaction.debit_amount
        if net == 0:
            raise ValidationError(f"Bank transaction {bank_transaction_id} has no net movement")
        if net > 0:
            lines = [(bank_account_code, net, None), (contra_account_code, None, net)]
        else:
            lines = [(contra_account_code, -net, None), (bank_account_code, None, -net)]

        return self.post_entry(
            company_id=transaction.company_id,
            fiscal_period_id=period_id,
            entry_date=transaction.transaction_date,
            description=transaction.details,
            lines=lines,
            reference=transaction.reference,
            bank_transaction_id=bank_transaction_id,
        )

    def post_bank_transactions(
        self,
        company_id: int,
        bank_account_code: str,
        fiscal_period_id: Optional[int] = None,
    ) -> PostingResult:
        """Post every unposted bank transaction whose contra account a rule supplies.

        Transactions that are already posted are left out of the result.
        Those no rule matches, or that cannot be posted, are reported as
        skipped and the rest of the batch continues.

        Args:
            company_id: Company ID
            bank_account_code: Ledger account for the bank
            fiscal_period_id: Restrict to transactions stored against this period

        Returns:
            PostingResult

        Raises:
            NotFoundError: If company not found
            StorageError: If the store fails
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        result = PostingResult()
        for transaction in self.db.list_bank_transactions(company_id, fiscal_period_id):
            if self.db.journal_entry_for_bank_transaction(transaction.id) is not None:
                continue
            try:
                result.posted[transaction.id] = self.post_bank_transaction(
                    transaction.id, bank_account_code, fiscal_period_id=fiscal_period_id
                )
            except (NotFoundError, ValidationError) as e:
                result.skipped[transaction.id] = str(e)

        logger.info("Bank transactions posted", company_id=company_id, **result.summary())
        return result

    def get_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        return self.db.get_journal_entry(entry_id)
