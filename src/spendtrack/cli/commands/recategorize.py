"""Bulk recategorization command."""

import click
from spendtrack.domain.recategorize import BulkRecategorizer


@click.command("recategorize")
@click.pass_context
def recategorize(ctx):
    """Re-run the rules on every transaction not categorized by hand."""
    db = ctx.obj["db"]
    updated = BulkRecategorizer(db).recategorize_all()
    click.echo(f"Recategorized {updated} transaction(s)")


def register_commands(cli):
    """Register recategorize command with main CLI."""
    cli.add_command(recategorize)
