"""Domain layer for ledgerkit application."""

_EXPORTS = {
    "CompanyService": "ledgerkit.domain.company",
    "FiscalPeriodService": "ledgerkit.domain.fiscal_period",
    "ChartOfAccountsService": "ledgerkit.domain.account",
    "JournalService": "ledgerkit.domain.journal",
    "StatementIngestionService": "ledgerkit.domain.ingestion",
    "TrialBalanceService": "ledgerkit.domain.trial_balance",
    "DuplicateChecker": "ledgerkit.domain.duplicates",
    "MappingRuleService": "ledgerkit.domain.mapping_rules",
}

__all__ = list(_EXPORTS)


# Services import the database and config layers, which import entities from
# this package; resolve them lazily to keep the import graph acyclic.
def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
