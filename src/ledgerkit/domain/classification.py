"""Transaction type classification.

The precedence below is fixed: fee detection runs before the amount rules
because fee rows often also fill the debit column, and the keyword rules run
before the numeric default because net lines can carry both a debit and a
credit.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ledgerkit.domain.entities import TransactionType, ZERO


@dataclass(frozen=True)
class ClassificationRules:
    """Keyword tables used by the type classifier (all lowercase)."""

    fee_keywords: tuple[str, ...] = ("fee", "charge")
    debit_keywords: tuple[str, ...] = (
        "withdrawal",
        "debit",
        "payment",
        "transfer to",
        "atm",
        "eft out",
    )
    credit_keywords: tuple[str, ...] = (
        "deposit",
        "credit",
        "salary",
        "transfer from",
        "interest",
        "dividend",
        "eft in",
        "refund",
    )


DEFAULT_RULES = ClassificationRules()


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def is_fee_description(description: Optional[str], rules: ClassificationRules = DEFAULT_RULES) -> bool:
    """Return True if the description names a bank fee or charge."""
    return _contains_any((description or "").lower(), rules.fee_keywords)


def keyword_direction(
    description: Optional[str], rules: ClassificationRules = DEFAULT_RULES
) -> Optional[TransactionType]:
    """Return DEBIT or CREDIT from description keywords, or None.

    Debit keywords are checked first, matching the classifier order.
    """
    text = (description or "").lower()
    if _contains_any(text, rules.debit_keywords):
        return TransactionType.DEBIT
    if _contains_any(text, rules.credit_keywords):
        return TransactionType.CREDIT
    return None


def determine_type(
    debit: Optional[Decimal],
    credit: Optional[Decimal],
    service_fee: Optional[Decimal],
    description: Optional[str],
    rules: ClassificationRules = DEFAULT_RULES,
) -> TransactionType:
    """Assign the final transaction type.

    Args:
        debit: Debit column amount (None counts as zero)
        credit: Credit column amount (None counts as zero)
        service_fee: Service fee amount (None counts as zero)
        description: Transaction description
        rules: Keyword tables

    Returns:
        TransactionType chosen by the first matching rule
    """
    debit = debit or ZERO
    credit = credit or ZERO
    service_fee = service_fee or ZERO

    if service_fee > 0 or is_fee_description(description, rules):
        return TransactionType.SERVICE_FEE

    if debit > 0 and credit == 0:
        return TransactionType.DEBIT
    if credit > 0 and debit == 0:
        return TransactionType.CREDIT

    direction = keyword_direction(description, rules)
    if direction is not None:
        return direction

    return TransactionType.CREDIT if credit - debit >= 0 else TransactionType.DEBIT
