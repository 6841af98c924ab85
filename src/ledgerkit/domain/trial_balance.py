"""Trial balance computation over posted journal lines."""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from ledgerkit.config import LedgerConfig, SignConvention
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    AccountBalance,
    DEBIT_NORMAL,
    JournalLine,
    TrialBalanceReport,
    ZERO,
)
from ledgerkit.domain.errors import NotFoundError, fiscal_period_not_found

logger = structlog.get_logger(__name__)


def _accumulate(lines: Iterable[JournalLine]) -> dict[str, list]:
    totals: dict[str, list] = {}
    for line in lines:
        entry = totals.setdefault(line.account_code, [line.account_name, line.account_type, ZERO, ZERO])
        entry[2] += line.debit_amount or ZERO
        entry[3] += line.credit_amount or ZERO
    return totals


def _movement(normal_balance: str, debits: Decimal, credits: Decimal) -> Decimal:
    if normal_balance == DEBIT_NORMAL:
        return debits - credits
    return credits - debits


def compute_account_balances(
    period_lines: Iterable[JournalLine],
    prior_lines: Iterable[JournalLine],
    convention: Optional[SignConvention] = None,
) -> list[AccountBalance]:
    """Compute opening, movement and closing balances per account.

    Args:
        period_lines: Journal lines posted in the target period
        prior_lines: Journal lines posted in all earlier periods
        convention: Account type and normal-balance table

    Returns:
        AccountBalance per account with activity, ordered by account code
    """
    convention = convention or SignConvention()
    period = _accumulate(period_lines)
    prior = _accumulate(prior_lines)

    balances = []
    for code in sorted(set(period) | set(prior)):
        name, account_type, prior_debits, prior_credits = prior.get(code, [None, None, ZERO, ZERO])
        if code in period:
            name, account_type = period[code][0], period[code][1]
        period_debits, period_credits = (period[code][2], period[code][3]) if code in period else (ZERO, ZERO)

        normal_balance = convention.normal_balance_for(code, account_type)
        opening = _movement(normal_balance, prior_debits, prior_credits)
        if opening == ZERO and period_debits == ZERO and period_credits == ZERO:
            continue

        balances.append(
            AccountBalance(
                account_code=code,
                account_name=name,
                normal_balance=normal_balance,
                opening_balance=opening,
                period_debits=period_debits,
                period_credits=period_credits,
                closing_balance=opening + _movement(normal_balance, period_debits, period_credits),
            )
        )
    return balances


def build_report(company_id: int, fiscal_period_id: int, balances: list[AccountBalance]) -> TrialBalanceReport:
    """Total the trial balance columns."""
    total_debit = sum((balance.trial_balance_debit for balance in balances), ZERO)
    total_credit = sum((balance.trial_balance_credit for balance in balances), ZERO)
    return TrialBalanceReport(
        company_id=company_id,
        fiscal_period_id=fiscal_period_id,
        accounts=tuple(balances),
        total_debit=total_debit,
        total_credit=total_credit,
    )


class TrialBalanceService:
    """Service for computing trial balances."""

    def __init__(self, db: Database, config: Optional[LedgerConfig] = None):
        """Initialize trial balance service.

        Args:
            db: Database instance
            config: Loaded configuration (sign convention)
        """
        self.db = db
        self.config = config or LedgerConfig()

    def compute_trial_balance(self, company_id: int, fiscal_period_id: int) -> TrialBalanceReport:
        """Compute the trial balance for a company's fiscal period.

        Opening balances carry forward from all periods that start before the
        target period. An imbalance is returned, not raised.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period ID

        Returns:
            TrialBalanceReport

        Raises:
            NotFoundError: If the fiscal period does not belong to the company
        """
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(fiscal_period_not_found(fiscal_period_id))

        period_lines = self.db.journal_lines_for_period(company_id, fiscal_period_id)
        prior_lines = self.db.journal_lines_before_period(company_id, fiscal_period_id)
        balances = compute_account_balances(period_lines, prior_lines, self.config.sign_convention)
        report = build_report(company_id, fiscal_period_id, balances)

        if report.balanced:
            logger.info(
                "Trial balance computed",
                company_id=company_id,
                fiscal_period_id=fiscal_period_id,
                accounts=len(balances),
                total=str(report.total_debit),
            )
        else:
            logger.warning(
                "Trial balance does not balance",
                company_id=company_id,
                fiscal_period_id=fiscal_period_id,
                total_debit=str(report.total_debit),
                total_credit=str(report.total_credit),
                difference=str(report.difference),
                heavier_side=report.imbalance_side,
            )
        return report
