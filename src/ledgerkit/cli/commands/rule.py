"""Mapping rule commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit
from ledgerkit.domain.entities import MatchType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.mapping_rules import MappingRuleService


@click.group()
def rule_group():
    """Manage rules that map bank transactions to ledger accounts."""
    pass


@rule_group.command("add")
@click.argument("company", metavar="COMPANY")
@click.argument("name", metavar="RULE_NAME")
@click.argument("match_value", metavar="MATCH")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.option(
    "--type",
    "match_type",
    type=click.Choice([t.value for t in MatchType], case_sensitive=False),
    default=MatchType.CONTAINS.value,
    show_default=True,
    help="How MATCH is compared with transaction details",
)
@click.option("--priority", type=int, default=0, show_default=True, help="Higher priorities are tried first")
@click.pass_context
def add_rule(ctx, company: str, name: str, match_value: str, account_code: str, match_type: str, priority: int):
    """Add a mapping rule.

    Examples:
        ledgerkit rule add "Acme Security" "Bank fees" "FEE" 8200
        ledgerkit rule add 1 "Salaries" "^SALARY .*" 8100 --type REGEX --priority 10
    """
    company_id = resolve_company_or_exit(ctx, company)
    try:
        rule_id = MappingRuleService(ctx.obj["db"]).create_rule(
            company_id, name, match_value, account_code, match_type=match_type, priority=priority
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created rule '{name}' (ID: {rule_id})")


@rule_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_rules(ctx, company: str):
    """List a company's mapping rules in the order they are tried."""
    company_id = resolve_company_or_exit(ctx, company)
    rules = MappingRuleService(ctx.obj["db"]).list_rules(company_id)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo("\nRules:")
    click.echo("-" * 80)
    for rule in rules:
        state = "" if rule.is_active else " (inactive)"
        click.echo(
            f"{rule.id:4d} | {rule.priority:3d} | {rule.name:20s} | "
            f"{rule.match_type.value:11s} {rule.match_value!r} -> {rule.account_code}{state}"
        )


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a mapping rule."""
    try:
        MappingRuleService(ctx.obj["db"]).delete_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted rule {rule_id}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
