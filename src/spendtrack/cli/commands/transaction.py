"""Transaction management commands."""

import click
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.errors import DomainError
from spendtrack.domain.transaction import TransactionService
from spendtrack.utils.amount_parser import parse_amount


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("set-amount")
@click.argument("transaction_id", type=int)
@click.argument("amount")
@click.pass_context
def set_amount(ctx, transaction_id: int, amount: str):
    """Correct the amount of a transaction.

    Examples:
        spendtrack transaction set-amount 12 450.00
        spendtrack transaction set-amount 12 "Rs. 1,250"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        new_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        service.update_amount(transaction_id, new_amount)
        click.echo(f"Transaction {transaction_id} amount set to ₹{new_amount:,.2f}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete-all")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_all_transactions(ctx, yes: bool):
    """Delete every stored transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    if not yes:
        click.confirm("Delete ALL transactions? This cannot be undone", abort=True)

    deleted = service.delete_all_transactions()
    click.echo(f"Deleted {deleted} transactions.")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
