"""Chart of accounts commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit
from ledgerkit.domain.account import ChartOfAccountsService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.errors import DomainError


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("add")
@click.argument("company", metavar="COMPANY")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="Account type (derived from the code's first digit if omitted)",
)
@click.pass_context
def add_account(ctx, company: str, code: str, name: str, account_type: str | None):
    """Add a ledger account.

    COMPANY can be a company name or ID.

    Examples:
        ledgerkit account add "Acme Security" 1100 "Bank Account"
        ledgerkit account add 1 2150 "VAT Payable" --type LIABILITY
    """
    company_id = resolve_company_or_exit(ctx, company)
    service = ChartOfAccountsService(ctx.obj["db"], ctx.obj["config"])
    try:
        account_id = service.create_account(company_id, code, name, account_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {code} '{name}' (ID: {account_id})")


@account_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_accounts(ctx, company: str):
    """List a company's chart of accounts."""
    company_id = resolve_company_or_exit(ctx, company)
    config = ctx.obj["config"]
    accounts = ChartOfAccountsService(ctx.obj["db"], config).list_accounts(company_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        account_type = config.sign_convention.account_type_for(acc.code, acc.account_type)
        click.echo(f"{acc.code:6s} | {acc.name:35s} | {account_type.value}")


@account_group.command("init")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def init_accounts(ctx, company: str):
    """Seed a company with the standard chart of accounts."""
    company_id = resolve_company_or_exit(ctx, company)
    try:
        created = ChartOfAccountsService(ctx.obj["db"], ctx.obj["config"]).initialize_default_chart(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if created == 0:
        click.echo("Chart of accounts already initialized.")
    else:
        click.echo(f"Created {created} accounts.")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
