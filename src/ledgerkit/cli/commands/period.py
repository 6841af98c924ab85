"""Fiscal period commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.fiscal_period import FiscalPeriodService
from ledgerkit.utils.date_parser import parse_date


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("name", metavar="PERIOD_NAME")
@click.option("--start", "start", required=True, help="First day (YYYY-MM-DD)")
@click.option("--end", "end", required=True, help="Last day (YYYY-MM-DD)")
@click.pass_context
def create_period(ctx, company: str, name: str, start: str, end: str):
    """Create a fiscal period for a company.

    COMPANY can be a company name or ID.

    Examples:
        ledgerkit period create "Acme Security" FY2025 --start 2024-03-01 --end 2025-02-28
    """
    company_id = resolve_company_or_exit(ctx, company)
    try:
        start_date = parse_date(start, day_first=False)
        end_date = parse_date(end, day_first=False)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        period_id = FiscalPeriodService(ctx.obj["db"]).create_period(
            company_id=company_id, name=name, start_date=start_date, end_date=end_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created fiscal period '{name}' (ID: {period_id}) from {start_date} to {end_date}")


@period_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_periods(ctx, company: str):
    """List a company's fiscal periods."""
    company_id = resolve_company_or_exit(ctx, company)
    periods = FiscalPeriodService(ctx.obj["db"]).list_periods(company_id)
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 60)
    for period in periods:
        status = "closed" if period.is_closed else "open"
        click.echo(f"ID: {period.id:3d} | {period.name:12s} | {period.start_date} to {period.end_date} | {status}")


@period_group.command("close")
@click.argument("company", metavar="COMPANY")
@click.argument("period", metavar="PERIOD")
@click.pass_context
def close_period(ctx, company: str, period: str):
    """Close a fiscal period to further journal posting."""
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period)
    try:
        FiscalPeriodService(ctx.obj["db"]).close_period(period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closed fiscal period {period_id}")


def register_commands(cli):
    """Register fiscal period commands with main CLI."""
    cli.add_command(period_group, name="period")
