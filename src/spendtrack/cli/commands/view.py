"""Transaction viewing commands."""

import click
from spendtrack.cli.date_filters import resolve_cli_date_range
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService
from spendtrack.domain.errors import DomainError
from spendtrack.domain.transaction import TransactionService


@click.command("view")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--month", help="Calendar month (YYYY-MM)")
@click.option("--today", is_flag=True, help="Only today's transactions")
@click.option("--category", help="Category name")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including the source text")
@click.pass_context
def view_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    month: str | None,
    today: bool,
    category: str | None,
    verbose: bool,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, month=month, today=today
    )

    try:
        transactions = service.list_transactions(start_time=start, end_time=end, category_name=category)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {cat.id: cat.name for cat in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Time: {txn.timestamp:%Y-%m-%d %H:%M}")
            click.echo(f"  Amount: ₹{txn.amount:,.2f} ({txn.transaction_type.value})")
            click.echo(f"  Merchant: {txn.merchant}")
            click.echo(f"  Category: {names.get(txn.category_id, 'Uncategorized')}")
            account = f" XX{txn.account_last4}" if txn.account_last4 else ""
            click.echo(f"  Bank: {txn.bank_name}{account}")
            if txn.is_manually_edited:
                click.echo("  Manually edited: yes")
            click.echo(f"  Source: {txn.raw_source_text}")
            click.echo("-" * 100)
        return

    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Type':<7} {'Category':<15} {'Merchant':<30}")
    click.echo("-" * 100)
    for txn in transactions:
        amount_str = f"₹{txn.amount:,.2f}"
        category_name = names.get(txn.category_id, "")
        click.echo(
            f"{txn.id:<6} {txn.timestamp:%Y-%m-%d}   {amount_str:>12} {txn.transaction_type.value:<7} "
            f"{category_name:<15} {txn.merchant[:30]:<30}"
        )


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_transactions)
