"""Bank transaction commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.ingestion import StatementIngestionService


@click.group()
def transaction_group():
    """View imported bank transactions."""
    pass


@transaction_group.command("list")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", help="Fiscal period name or ID")
@click.pass_context
def list_transactions(ctx, company: str, period: str | None):
    """List imported bank transactions.

    Examples:
        ledgerkit transaction list --company "Acme Security"
        ledgerkit transaction list --company 1 --period FY2025
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period) if period else None

    try:
        transactions = StatementIngestionService(ctx.obj["db"], ctx.obj["config"]).list_transactions(
            company_id, period_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5s}  {'Date':10s}  {'Details':40s}  {'Debit':>12s}  {'Credit':>12s}  {'Balance':>12s}")
    click.echo("-" * 100)
    for txn in transactions:
        details = txn.details if len(txn.details) <= 40 else txn.details[:37] + "..."
        balance = f"{txn.balance:,.2f}" if txn.balance is not None else ""
        click.echo(
            f"{txn.id:5d}  {txn.transaction_date.isoformat():10s}  {details:40s}  "
            f"{txn.debit_amount:12,.2f}  {txn.credit_amount:12,.2f}  {balance:>12s}"
        )
    click.echo(f"\nTotal: {len(transactions)} transactions")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
