"""Journal posting commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.journal import JournalService
from ledgerkit.utils.date_parser import parse_date


def _parse_line(value: str) -> tuple[str, str, str]:
    parts = value.split(":")
    if len(parts) != 3:
        raise click.BadParameter(f"'{value}' must be CODE:DEBIT:CREDIT (e.g. 1100:500.00:)")
    code, debit, credit = (part.strip() for part in parts)
    return code, debit.replace(",", ""), credit.replace(",", "")


@click.group()
def journal_group():
    """Post journal entries."""
    pass


@journal_group.command("post")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.option("--date", "entry_date", required=True, help="Entry date (YYYY-MM-DD)")
@click.option("--description", required=True, help="Entry description")
@click.option("--reference", help="Reference")
@click.option("--line", "lines", multiple=True, required=True, help="CODE:DEBIT:CREDIT, repeat per line")
@click.pass_context
def post_entry(ctx, company: str, period: str, entry_date: str, description: str, reference: str | None, lines):
    """Post a balanced journal entry.

    Examples:
        ledgerkit journal post --company 1 --period FY2025 --date 2025-03-01 \\
            --description "Capital" --line 1100:1000.00: --line 3000::1000.00
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period)
    try:
        day = parse_date(entry_date, day_first=False)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    parsed = [_parse_line(value) for value in lines]
    try:
        entry_id = JournalService(ctx.obj["db"]).post_entry(
            company_id=company_id,
            fiscal_period_id=period_id,
            entry_date=day,
            description=description,
            lines=parsed,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted journal entry {entry_id}")


@journal_group.command("post-bank")
@click.argument("transaction_id", type=int)
@click.option("--bank-account", required=True, help="Ledger account code of the bank")
@click.option("--contra-account", help="Offsetting ledger account code (default: first matching rule)")
@click.pass_context
def post_bank_transaction(ctx, transaction_id: int, bank_account: str, contra_account: str | None):
    """Post an imported bank transaction to the journal.

    Examples:
        ledgerkit journal post-bank 12 --bank-account 1100 --contra-account 8200
        ledgerkit journal post-bank 12 --bank-account 1100
    """
    try:
        entry_id = JournalService(ctx.obj["db"]).post_bank_transaction(
            transaction_id, bank_account, contra_account
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted bank transaction {transaction_id} as journal entry {entry_id}")


@journal_group.command("post-all")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--bank-account", required=True, help="Ledger account code of the bank")
@click.option("--period", help="Only transactions imported into this fiscal period")
@click.pass_context
def post_all(ctx, company: str, bank_account: str, period: str | None):
    """Post every unposted bank transaction a mapping rule covers.

    Examples:
        ledgerkit journal post-all --company "Acme Security" --bank-account 1100
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period) if period else None
    try:
        result = JournalService(ctx.obj["db"]).post_bank_transactions(company_id, bank_account, period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted: {len(result.posted)} transactions")
    if result.skipped:
        click.echo(f"Skipped: {len(result.skipped)} transactions")
        for transaction_id, reason in result.skipped.items():
            click.echo(f"  {transaction_id}: {reason}")


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
