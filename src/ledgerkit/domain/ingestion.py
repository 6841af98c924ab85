"""Bank statement ingestion."""

from datetime import date
from typing import Iterable, Optional, Union

import structlog

from ledgerkit.config import LedgerConfig
from ledgerkit.database.base import Database
from ledgerkit.domain.duplicates import DuplicateChecker, stored_debit
from ledgerkit.domain.entities import (
    BuildFailure,
    DuplicateRejection,
    FiscalPeriod,
    IngestResult,
    RawFieldBag,
    RawLine,
    UnparsedLine,
)
from ledgerkit.domain.errors import (
    BuildError,
    NotFoundError,
    company_not_found,
    fiscal_period_not_found,
)
from ledgerkit.domain.standardization import StandardizedTransaction, build_transaction
from ledgerkit.parsers.chain import ChainOutput, ParserChain
from ledgerkit.parsers.context import ParsingContext
from ledgerkit.parsers.line_classifier import LineClassifier

logger = structlog.get_logger(__name__)


def _as_raw_lines(lines: Iterable[Union[str, RawLine]]) -> Iterable[RawLine]:
    for number, line in enumerate(lines, start=1):
        if isinstance(line, RawLine):
            yield line
        else:
            yield RawLine(text=line.rstrip("\r\n"), line_number=number)


def iter_statement(
    lines: Iterable[Union[str, RawLine]],
    context: ParsingContext,
    classifier: Optional[LineClassifier] = None,
    chain: Optional[ParserChain] = None,
) -> Iterable[ChainOutput]:
    """Classify and parse statement lines, yielding results in order.

    Lines the classifier rejects never reach a parser; plain text lines may
    still extend the pending record as a description continuation.
    """
    classifier = classifier or LineClassifier()
    chain = chain or ParserChain()

    for line in _as_raw_lines(lines):
        context.observe(line.text)
        if classifier.is_transaction(line.text):
            yield from chain.feed(line, context)
        elif classifier.is_noise(line.text) or not chain.offer_continuation(line, context):
            context.continuation_open = False
            logger.debug("Line skipped", line_number=line.line_number)
    yield from chain.finish(context)


def parse_statement(
    lines: Iterable[Union[str, RawLine]],
    context: Optional[ParsingContext] = None,
    config: Optional[LedgerConfig] = None,
) -> tuple[list[RawFieldBag], list[UnparsedLine]]:
    """Parse statement lines without touching a store.

    Args:
        lines: Statement text lines (strings or RawLine)
        context: Parsing context; a fresh one is created from config if None
        config: Loaded configuration

    Returns:
        Tuple of (field bags, unparsed lines)
    """
    config = config or LedgerConfig()
    if context is None:
        context = ParsingContext(
            default_year=config.parsing.default_year,
            day_first=config.parsing.day_first,
        )
    bags: list[RawFieldBag] = []
    unparsed: list[UnparsedLine] = []
    for item in iter_statement(lines, context):
        if isinstance(item, UnparsedLine):
            unparsed.append(item)
        else:
            bags.append(item)
    return bags, unparsed


class StatementIngestionService:
    """Service for importing bank statement text."""

    def __init__(self, db: Database, config: Optional[LedgerConfig] = None):
        """Initialize ingestion service.

        Args:
            db: Database instance
            config: Loaded configuration
        """
        self.db = db
        self.config = config or LedgerConfig()
        self.classifier = LineClassifier()

    def ingest(
        self,
        lines: Iterable[Union[str, RawLine]],
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        statement_date: Optional[date] = None,
        source_name: Optional[str] = None,
    ) -> IngestResult:
        """Ingest one statement.

        Each accepted transaction is committed before the next candidate is
        checked, so duplicate lookups see earlier lines of the same run.

        Args:
            lines: Statement text lines in document order
            company_id: Owning company
            fiscal_period_id: Optional fiscal period; dates outside it are rejected
            statement_date: Date used for lines without their own date
            source_name: Source document name stored with each transaction

        Returns:
            IngestResult with accepted, duplicate, unparsed and failed lines

        Raises:
            NotFoundError: If the company or fiscal period does not exist
            StorageError: If the store fails; earlier inserts stay committed
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        period = None
        if fiscal_period_id is not None:
            period = self.db.get_fiscal_period(fiscal_period_id)
            if period is None or period.company_id != company_id:
                raise NotFoundError(fiscal_period_not_found(fiscal_period_id))

        context = ParsingContext(
            statement_date=statement_date,
            source_name=source_name,
            default_year=self.config.parsing.default_year,
            day_first=self.config.parsing.day_first,
        )
        if period is not None:
            context.statement_start = period.start_date
            context.statement_end = period.end_date

        checker = DuplicateChecker(self.db, company_id)
        chain = ParserChain()
        result = IngestResult()

        for item in iter_statement(lines, context, self.classifier, chain):
            if isinstance(item, UnparsedLine):
                result.unparsed.append(item)
                continue
            transaction = self._build(item, period, result)
            if transaction is None:
                continue

            existing = checker.find_duplicate(transaction)
            if existing is not None:
                logger.info(
                    "Duplicate transaction skipped",
                    line_number=item.line_number,
                    existing_id=existing.id,
                )
                result.rejected_duplicates.append(
                    DuplicateRejection(transaction=transaction, existing=existing, line_number=item.line_number)
                )
                continue

            transaction_id = self._store(transaction, company_id, fiscal_period_id, source_name)
            result.accepted.append(transaction)
            result.accepted_ids.append(transaction_id)

        logger.info("Statement ingested", company_id=company_id, source=source_name, **result.summary())
        return result

    def _build(
        self, bag: RawFieldBag, period: Optional[FiscalPeriod], result: IngestResult
    ) -> Optional[StandardizedTransaction]:
        try:
            transaction = build_transaction(bag, self.config.classification)
        except BuildError as e:
            logger.warning("Transaction rejected", line_number=bag.line_number, field=e.field, error=str(e))
            result.build_errors.append(BuildFailure(line_number=bag.line_number, field=e.field, message=str(e)))
            return None

        if period is not None and not period.contains(transaction.date):
            message = f"Date {transaction.date} is outside fiscal period '{period.name}'"
            logger.warning("Transaction rejected", line_number=bag.line_number, field="date", error=message)
            result.build_errors.append(BuildFailure(line_number=bag.line_number, field="date", message=message))
            return None
        return transaction

    def _store(
        self,
        transaction: StandardizedTransaction,
        company_id: int,
        fiscal_period_id: Optional[int],
        source_name: Optional[str],
    ) -> int:
        return self.db.create_bank_transaction(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            transaction_date=transaction.date,
            details=transaction.description,
            debit_amount=stored_debit(transaction),
            credit_amount=transaction.credit_amount,
            balance=transaction.balance,
            service_fee=transaction.service_fee,
            reference=transaction.reference,
            transaction_type=transaction.type,
            source_name=source_name,
        )

    def list_transactions(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list:
        """List stored bank transactions for a company."""
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        return self.db.list_bank_transactions(company_id, fiscal_period_id)
