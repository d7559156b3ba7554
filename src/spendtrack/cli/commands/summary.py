"""Summary commands."""

import click
from spendtrack.cli.date_filters import resolve_cli_date_range
from spendtrack.domain.summary import SummaryService


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--month", help="Calendar month (YYYY-MM); defaults to the current month")
@click.option("--today", is_flag=True, help="Only today's spending")
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, month: str | None, today: bool):
    """Show spending by category.

    Only debits count as spending. Without any date option the current
    month is summarized.
    """
    db = ctx.obj["db"]
    service = SummaryService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        month=month,
        today=today,
        default_to_this_month=True,
    )

    total = service.total_expenses(start, end)
    expenses = service.category_expenses(start, end)

    if start is not None and end is not None:
        click.echo(f"\nSpending from {start:%Y-%m-%d} to {end:%Y-%m-%d}")
    else:
        click.echo("\nSpending")
    click.echo("-" * 72)

    if not expenses:
        click.echo("No expenses found.")
        return

    for item in expenses:
        label = f"{item.category.icon} {item.category.name}"
        amount_str = f"₹{item.total_amount:,.2f}"
        click.echo(
            f"{label:<30} {amount_str:>15} {item.percentage:>6.1f}%  ({item.transaction_count} txn)"
        )
    click.echo("-" * 72)
    click.echo(f"{'Total':<30} {'₹' + format(total, ',.2f'):>15}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
