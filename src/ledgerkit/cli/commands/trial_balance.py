"""Trial balance command."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.trial_balance import TrialBalanceService


@click.command("trial-balance")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.pass_context
def trial_balance(ctx, company: str, period: str):
    """Show the trial balance for a fiscal period.

    Exits with status 2 when the books do not balance.
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period)
    try:
        report = TrialBalanceService(ctx.obj["db"], ctx.obj["config"]).compute_trial_balance(
            company_id, period_id
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not report.accounts:
        click.echo("No journal activity for this period.")
        return

    click.echo(f"\n{'Code':6s}  {'Account':35s}  {'Debit':>15s}  {'Credit':>15s}")
    click.echo("-" * 78)
    for balance in report.accounts:
        debit = f"{balance.trial_balance_debit:,.2f}" if balance.trial_balance_debit else ""
        credit = f"{balance.trial_balance_credit:,.2f}" if balance.trial_balance_credit else ""
        click.echo(f"{balance.account_code:6s}  {balance.account_name:35s}  {debit:>15s}  {credit:>15s}")
    click.echo("-" * 78)
    click.echo(f"{'':6s}  {'TOTAL':35s}  {report.total_debit:>15,.2f}  {report.total_credit:>15,.2f}")

    if report.balanced:
        click.echo("\nBalanced")
    else:
        click.echo(
            f"\nNOT BALANCED: {report.imbalance_side} side heavier by {abs(report.difference):,.2f}",
            err=True,
        )
        ctx.exit(2)


def register_commands(cli):
    """Register trial balance command with main CLI."""
    cli.add_command(trial_balance)
