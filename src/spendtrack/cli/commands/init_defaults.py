"""Initialize default categories and rules."""

import click
from spendtrack.domain.category import CategoryService


@click.command("init-defaults")
@click.pass_context
def init_defaults(ctx):
    """Initialize database with default categories and merchant rules.

    Safe to run more than once: existing categories are kept and rules are
    only seeded into an empty rule table.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    click.echo("Creating default categories and rules...")
    categories_created, rules_created = service.seed_defaults()

    if categories_created == 0 and rules_created == 0:
        click.echo("Defaults already present, nothing to do.")
        return

    click.echo(f"Created {categories_created} categories and {rules_created} rules.")


def register_commands(cli):
    """Register init-defaults command with main CLI."""
    cli.add_command(init_defaults)
