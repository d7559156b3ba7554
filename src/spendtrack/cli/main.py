"""Main CLI entry point."""

import logging
import os

import click
from spendtrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from spendtrack.cli.commands import (
    categorize,
    category,
    init_defaults,
    recategorize,
    rule,
    sms,
    statement,
    summary,
    transaction,
    view,
)

LOG_LEVEL_ENV_VAR = "SPENDTRACK_LOG_LEVEL"


def configure_logging(verbose: bool) -> None:
    """Configure root logging once for the CLI process."""
    level_name = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SPENDTRACK_DB_PATH environment variable)",
    envvar="SPENDTRACK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Spendtrack - Expense tracking from bank SMS and statements.

    Parse bank SMS alerts and HDFC-style PDF statements into transactions and
    categorize them with merchant rules.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
init_defaults.register_commands(cli)
category.register_commands(cli)
rule.register_commands(cli)
sms.register_commands(cli)
statement.register_commands(cli)
view.register_commands(cli)
categorize.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
recategorize.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
