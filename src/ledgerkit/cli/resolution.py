"""CLI helpers for company and fiscal period resolution."""

from __future__ import annotations

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.company import CompanyService
from ledgerkit.domain.errors import DomainError, NotFoundError
from ledgerkit.domain.fiscal_period import FiscalPeriodService


def resolve_company_or_exit(ctx: click.Context, company: str | int) -> int:
    """Resolve company name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return CompanyService(ctx.obj["db"]).resolve_company(company)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_period_or_exit(ctx: click.Context, company_id: int, period: str | int) -> int:
    """Resolve a fiscal period name or ID within a company, or exit."""
    service = FiscalPeriodService(ctx.obj["db"])
    for candidate in service.list_periods(company_id):
        if str(candidate.id) == str(period) or candidate.name == period:
            return candidate.id
    handle_domain_error(ctx, NotFoundError(f"Fiscal period '{period}' not found for company {company_id}"))
