"""Manual categorization command."""

import click
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService
from spendtrack.domain.errors import DomainError
from spendtrack.domain.transaction import TransactionService


def _assign(service: TransactionService, transaction_ids: list[int], category_id: int) -> dict[int, str]:
    """Categorize each transaction, returning failure messages keyed by ID."""
    failures = {}
    for txn_id in transaction_ids:
        try:
            service.categorize_manually(txn_id, category_id)
        except DomainError as e:
            failures[txn_id] = str(e)
    return failures


@click.command("categorize")
@click.argument("transaction_ids", nargs=-1, required=True, type=int)
@click.argument("category_name", nargs=1)
@click.pass_context
def categorize_transaction(ctx, transaction_ids: tuple[int, ...], category_name: str):
    """Move one or more transactions into CATEGORY_NAME.

    Transactions categorized this way are marked as manually edited and
    keep their category when rules are added, changed or re-run.

    Examples:
        spendtrack categorize 14 Food
        spendtrack categorize 3 8 21 Shopping
    """
    db = ctx.obj["db"]

    try:
        category = CategoryService(db).require_category(category_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    ids = list(dict.fromkeys(transaction_ids))
    failures = _assign(TransactionService(db), ids, category.id)

    if len(ids) == 1:
        if failures:
            handle_domain_error(ctx, DomainError(failures[ids[0]]))
        click.echo(f"Transaction {ids[0]} categorized as '{category.name}'")
        return

    click.echo(f"Categorizing {len(ids)} transactions as '{category.name}'...")
    for txn_id in ids:
        if txn_id in failures:
            click.echo(f"✗ Transaction {txn_id}: {failures[txn_id]}")
        else:
            click.echo(f"✓ Transaction {txn_id} categorized")

    click.echo(f"\nResults: {len(ids) - len(failures)} succeeded, {len(failures)} failed")
    if failures:
        ctx.exit(1)


def register_commands(cli):
    """Register categorize command with main CLI."""
    cli.add_command(categorize_transaction)
