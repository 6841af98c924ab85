"""Transaction-to-account mapping rules."""

import re
from typing import Optional

import structlog

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import BankTransaction, LedgerAccount, MappingRule, MatchType
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    company_not_found,
    ledger_account_not_found,
    mapping_rule_not_found,
)

logger = structlog.get_logger(__name__)


class MappingRuleService:
    """Service for keyword rules that pick a transaction's contra account."""

    def __init__(self, db: Database):
        """Initialize mapping rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        company_id: int,
        name: str,
        match_value: str,
        account_code: str,
        match_type: MatchType | str = MatchType.CONTAINS,
        priority: int = 0,
        is_active: bool = True,
    ) -> int:
        """Create a mapping rule.

        Args:
            company_id: Company ID
            name: Rule name, unique per company
            match_value: Text (or pattern, for REGEX) compared with transaction details
            account_code: Ledger account matching transactions are posted against
            match_type: How match_value is compared
            priority: Higher priorities are tried first
            is_active: Inactive rules never match

        Returns:
            Mapping rule ID

        Raises:
            NotFoundError: If company or account not found
            ValidationError: If name, value, type or pattern is invalid
            ConflictError: If the name already exists for the company
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        name = (name or "").strip()
        match_value = (match_value or "").strip()
        if not name:
            raise ValidationError("Rule name must not be empty")
        if not match_value:
            raise ValidationError("Rule match value must not be empty")

        if not isinstance(match_type, MatchType):
            try:
                match_type = MatchType(str(match_type).upper())
            except ValueError:
                valid = ", ".join(t.value for t in MatchType)
                raise ValidationError(f"Invalid match type '{match_type}'. Must be one of: {valid}")
        if match_type == MatchType.REGEX:
            try:
                re.compile(match_value)
            except re.error as e:
                raise ValidationError(f"Invalid rule pattern '{match_value}': {e}")

        account = self.db.get_ledger_account(company_id, account_code)
        if account is None:
            raise NotFoundError(ledger_account_not_found(account_code, company_id))

        if any(rule.name == name for rule in self.db.list_mapping_rules(company_id)):
            raise ConflictError(f"Mapping rule '{name}' already exists for company {company_id}")

        return self.db.create_mapping_rule(
            company_id=company_id,
            name=name,
            match_type=match_type,
            match_value=match_value,
            account_id=account.id,
            priority=priority,
            is_active=is_active,
        )

    def get_rule(self, rule_id: int) -> Optional[MappingRule]:
        """Get mapping rule by ID."""
        return self.db.get_mapping_rule(rule_id)

    def list_rules(self, company_id: int) -> list[MappingRule]:
        """List a company's rules in the order they are tried."""
        return self.db.list_mapping_rules(company_id)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a mapping rule.

        Raises:
            NotFoundError: If rule not found
        """
        if self.db.get_mapping_rule(rule_id) is None:
            raise NotFoundError(mapping_rule_not_found(rule_id))
        self.db.delete_mapping_rule(rule_id)

    def find_rule(self, company_id: int, description: Optional[str]) -> Optional[MappingRule]:
        """Return the first rule, in priority order, matching the description."""
        if description is None or not description.strip():
            return None
        for rule in self.db.list_mapping_rules(company_id):
            if rule.matches(description):
                return rule
        return None

    def match_account(self, transaction: BankTransaction) -> Optional[LedgerAccount]:
        """Return the ledger account the transaction maps to, if any rule matches."""
        rule = self.find_rule(transaction.company_id, transaction.details)
        if rule is None:
            logger.debug("No mapping rule matched", transaction_id=transaction.id)
            return None
        logger.debug(
            "Mapping rule matched",
            transaction_id=transaction.id,
            rule=rule.name,
            account_code=rule.account_code,
        )
        return self.db.get_ledger_account(transaction.company_id, rule.account_code)
