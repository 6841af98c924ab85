"""Bank statement import command."""

from pathlib import Path

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.ingestion import StatementIngestionService
from ledgerkit.utils.date_parser import parse_date


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", help="Fiscal period name or ID; dates outside it are rejected")
@click.option("--statement-date", help="Date for lines without their own (YYYY-MM-DD)")
@click.pass_context
def import_statement(ctx, statement_file: str, company: str, period: str | None, statement_date: str | None):
    """Import transactions from extracted statement text.

    STATEMENT_FILE is a text file holding one extracted statement line per line.

    Examples:
        ledgerkit import march.txt --company "Acme Security" --period FY2025
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period) if period else None

    day = None
    if statement_date is not None:
        try:
            day = parse_date(statement_date, day_first=False)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    path = Path(statement_file)
    service = StatementIngestionService(ctx.obj["db"], ctx.obj["config"])
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            result = service.ingest(
                handle,
                company_id=company_id,
                fiscal_period_id=period_id,
                statement_date=day,
                source_name=path.name,
            )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nImport complete:")
    click.echo(f"  Imported: {len(result.accepted)} transactions")
    click.echo(f"  Skipped: {len(result.rejected_duplicates)} duplicates")
    if result.unparsed:
        click.echo(f"  Unparsed: {len(result.unparsed)} lines")
        for line in result.unparsed:
            click.echo(f"    line {line.line_number}: {line.text.strip()} ({line.reason})", err=True)
    if result.build_errors:
        click.echo(f"  Errors: {len(result.build_errors)}")
        for failure in result.build_errors:
            click.echo(f"    line {failure.line_number}: {failure.message}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
