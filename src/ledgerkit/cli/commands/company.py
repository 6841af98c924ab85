"""Company management commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.company import CompanyService
from ledgerkit.domain.errors import DomainError


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("name", metavar="COMPANY_NAME")
@click.option("--registration", help="Company registration number")
@click.pass_context
def create_company(ctx, name: str, registration: str | None):
    """Create a new company.

    Examples:
        ledgerkit company create "Acme Security"
        ledgerkit company create "Acme Security" --registration 2019/123456/07
    """
    service = CompanyService(ctx.obj["db"])
    try:
        company_id = service.create_company(name=name, registration_number=registration)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created company '{name}' (ID: {company_id})")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    companies = CompanyService(ctx.obj["db"]).list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 60)
    for company in companies:
        registration = company.registration_number or "-"
        click.echo(f"ID: {company.id:3d} | {company.name:30s} | Reg: {registration}")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
