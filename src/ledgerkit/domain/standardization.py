"""Standardized transaction value type and its builder."""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerkit.domain.classification import ClassificationRules, DEFAULT_RULES, determine_type
from ledgerkit.domain.entities import RawFieldBag, TransactionType, ZERO
from ledgerkit.domain.errors import BuildError
from ledgerkit.utils.amount_parser import split_amount

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: Optional[str]) -> str:
    """Strip and collapse internal whitespace runs to single spaces."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def normalize_description(description: Optional[str]) -> str:
    """Normalise a description for duplicate matching.

    Leading/trailing whitespace is stripped, internal runs collapse to one
    space and case is folded. Punctuation is kept as-is.
    """
    return collapse_whitespace(description).casefold()


@dataclass(frozen=True)
class StandardizedTransaction:
    """Validated, immutable statement transaction.

    ``type`` is never supplied by callers; it is derived from the amounts
    and description on construction so it can always be reproduced from
    stored fields.
    """

    date: date
    description: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    service_fee: Decimal = ZERO
    balance: Optional[Decimal] = None
    reference: Optional[str] = None
    line_number: Optional[int] = field(default=None, compare=False)
    rules: ClassificationRules = field(default=DEFAULT_RULES, compare=False, repr=False)
    type: TransactionType = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "type",
            determine_type(
                self.debit_amount,
                self.credit_amount,
                self.service_fee,
                self.description,
                self.rules,
            ),
        )

    @property
    def amount(self) -> Decimal:
        """The single amount matching the transaction type."""
        if self.type == TransactionType.SERVICE_FEE:
            # Fee rows may carry the fee in the debit or credit column only.
            if self.service_fee > 0:
                return self.service_fee
            return self.debit_amount if self.debit_amount > 0 else self.credit_amount
        if self.type == TransactionType.DEBIT:
            return self.debit_amount
        return self.credit_amount

    @property
    def has_service_fee(self) -> bool:
        return self.service_fee > 0 or self.type == TransactionType.SERVICE_FEE


def _to_amount(value, field_name: str) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        try:
            amount, _ = split_amount(value)
        except ValueError as e:
            raise BuildError(field_name, str(e))
    else:
        raise BuildError(field_name, f"Unsupported amount type for '{field_name}': {type(value).__name__}")
    if amount < 0:
        raise BuildError(field_name, f"Field '{field_name}' must not be negative, got {amount}")
    return amount


def _to_balance(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        magnitude, marker = split_amount(value)
        return -magnitude if marker == "D" else magnitude
    return Decimal(value)


def build_transaction(
    fields: RawFieldBag, rules: Optional[ClassificationRules] = None
) -> StandardizedTransaction:
    """Validate a field bag and build a StandardizedTransaction.

    Args:
        fields: Parser output
        rules: Keyword tables for type classification

    Returns:
        Immutable StandardizedTransaction

    Raises:
        BuildError: If date or description is missing, or an amount is invalid
    """
    if fields is None:
        raise BuildError("fields", "No fields to build a transaction from")
    if fields.date is None:
        raise BuildError("date")

    description = collapse_whitespace(fields.description)
    if not description:
        raise BuildError("description")

    try:
        balance = _to_balance(fields.balance)
    except ValueError as e:
        raise BuildError("balance", str(e))

    reference = collapse_whitespace(fields.reference) or None

    return StandardizedTransaction(
        date=fields.date,
        description=description,
        debit_amount=_to_amount(fields.debit, "debit"),
        credit_amount=_to_amount(fields.credit, "credit"),
        service_fee=_to_amount(fields.service_fee, "service_fee"),
        balance=balance,
        reference=reference,
        line_number=fields.line_number,
        rules=rules or DEFAULT_RULES,
    )
