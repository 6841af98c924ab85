"""Main CLI entry point."""

import click

from ledgerkit.config import CONFIG_PATH_ENV, load_config
from ledgerkit.database.factories import DB_PATH_ENV, create_sqlite_database
from ledgerkit.domain.errors import ConfigurationError
from ledgerkit.logging import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    company,
    import_cmd,
    journal,
    period,
    rule,
    transaction,
    trial_balance,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    help=f"Path to YAML config file (overrides {CONFIG_PATH_ENV} environment variable)",
    envvar=CONFIG_PATH_ENV,
)
@click.option("-v", "--verbose", is_flag=True, help="Log per-line parsing decisions")
@click.option("--json-logs", is_flag=True, help="Emit log events as JSON lines")
@click.pass_context
def cli(ctx, db_path: str | None, config_path: str | None, verbose: bool, json_logs: bool):
    """Ledgerkit - Bank statement ingestion and trial balance.

    Import extracted bank statement text into a company's ledger, post
    journal entries and check that the books balance.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(verbose=verbose, json_output=json_logs)
        try:
            ctx.obj["config"] = load_config(config_path)
        except ConfigurationError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
company.register_commands(cli)
period.register_commands(cli)
account.register_commands(cli)
rule.register_commands(cli)
import_cmd.register_commands(cli)
transaction.register_commands(cli)
journal.register_commands(cli)
trial_balance.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
