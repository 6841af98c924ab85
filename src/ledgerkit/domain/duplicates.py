"""Duplicate detection against persisted bank transactions."""

from typing import Optional

import structlog

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import BankTransaction, ZERO
from ledgerkit.domain.standardization import StandardizedTransaction

logger = structlog.get_logger(__name__)


class DuplicateChecker:
    """Checks candidates against already-committed bank transactions.

    The match key is company, date, debit, credit, description and running
    balance; all must match. Only the store is consulted, so lines of the
    same batch only see each other once they have been committed.
    """

    def __init__(self, db: Database, company_id: int):
        """Initialize duplicate checker.

        Args:
            db: Database instance
            company_id: Company whose transactions are searched
        """
        self.db = db
        self.company_id = company_id

    def find_duplicate(self, candidate: Optional[StandardizedTransaction]) -> Optional[BankTransaction]:
        """Return the stored transaction matching the candidate, if any."""
        if candidate is None:
            logger.warning("Duplicate check called without a candidate", company_id=self.company_id)
            return None
        return self.db.find_bank_transaction(
            company_id=self.company_id,
            transaction_date=candidate.date,
            debit_amount=stored_debit(candidate),
            credit_amount=candidate.credit_amount or ZERO,
            description=candidate.description,
            balance=candidate.balance,
        )

    def is_duplicate(self, candidate: Optional[StandardizedTransaction]) -> bool:
        """Return True if an identical transaction is already stored."""
        if candidate is None:
            logger.warning("Duplicate check called without a candidate", company_id=self.company_id)
            return False
        return self.db.bank_transaction_exists(
            company_id=self.company_id,
            transaction_date=candidate.date,
            debit_amount=stored_debit(candidate),
            credit_amount=candidate.credit_amount or ZERO,
            description=candidate.description,
            balance=candidate.balance,
        )


def stored_debit(transaction: StandardizedTransaction):
    """Debit column value as persisted: fees are money out."""
    return (transaction.debit_amount or ZERO) + (transaction.service_fee or ZERO)
