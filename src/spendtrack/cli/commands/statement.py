"""Bank statement preview and import commands."""

import click
from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService
from spendtrack.domain.entities import PdfTransaction
from spendtrack.domain.errors import (
    DomainError,
    PdfInvalidPasswordError,
    PdfPasswordRequiredError,
)
from spendtrack.domain.statement_import import STATEMENT_BANK_NAME, StatementImportService

MAX_PASSWORD_ATTEMPTS = 3


def _parse_with_password_prompt(
    ctx, service: StatementImportService, file_path: str, password: str | None, withdrawals_only: bool
) -> list[PdfTransaction]:
    """Parse a statement, asking for the password while it is missing or wrong."""
    attempts = 0
    while True:
        try:
            return service.parse_file(file_path, password=password, withdrawals_only=withdrawals_only)
        except (PdfPasswordRequiredError, PdfInvalidPasswordError) as e:
            attempts += 1
            if attempts > MAX_PASSWORD_ATTEMPTS:
                handle_domain_error(ctx, e)
            if isinstance(e, PdfInvalidPasswordError):
                click.echo("Invalid password.", err=True)
            password = click.prompt("Statement password", hide_input=True)
        except DomainError as e:
            handle_domain_error(ctx, e)


def _print_rows(transactions: list[PdfTransaction], category_names: dict[int, str]) -> None:
    click.echo(f"\n{'#':<4} {'Date':<10} {'Debit':>12} {'Credit':>12} {'Category':<15} Description")
    click.echo("-" * 100)
    for index, txn in enumerate(transactions, start=1):
        debit = f"{txn.debit_amount:,.2f}" if txn.debit_amount is not None else ""
        credit = f"{txn.credit_amount:,.2f}" if txn.credit_amount is not None else ""
        category = category_names.get(txn.suggested_category_id, "")
        flag = " [duplicate]" if txn.is_duplicate else ""
        click.echo(
            f"{index:<4} {txn.original_date_text:<10} {debit:>12} {credit:>12} "
            f"{category:<15} {txn.description[:50]}{flag}"
        )


def _print_totals(service: StatementImportService, transactions: list[PdfTransaction]) -> None:
    duplicates = sum(1 for txn in transactions if txn.is_duplicate)
    click.echo(f"\n{len(transactions)} transaction(s), {duplicates} possible duplicate(s)")
    click.echo(f"Total withdrawals: ₹{service.total_debit_amount(transactions):,.2f}")


@click.group()
def statement_group():
    """Preview and import bank statements (PDF or extracted text)."""
    pass


@statement_group.command("preview")
@click.argument("statement_file", type=click.Path(exists=True))
@click.option("--password", help="Statement password (prompted for if needed)")
@click.option("--withdrawals-only", is_flag=True, help="Ignore deposits")
@click.pass_context
def preview_statement(ctx, statement_file: str, password: str | None, withdrawals_only: bool):
    """Show the transactions found in a statement without importing them."""
    db = ctx.obj["db"]
    service = StatementImportService(db)

    transactions = _parse_with_password_prompt(ctx, service, statement_file, password, withdrawals_only)
    if not transactions:
        click.echo("No transactions found in statement.")
        return

    names = {cat.id: cat.name for cat in CategoryService(db).list_categories()}
    _print_rows(transactions, names)
    _print_totals(service, transactions)


@statement_group.command("import")
@click.argument("statement_file", type=click.Path(exists=True))
@click.option("--password", help="Statement password (prompted for if needed)")
@click.option("--withdrawals-only", is_flag=True, help="Ignore deposits")
@click.option("--skip-duplicates", is_flag=True, help="Do not import rows flagged as duplicates")
@click.option("--bank-name", default=STATEMENT_BANK_NAME, show_default=True, help="Bank name for imported rows")
@click.option("--yes", is_flag=True, help="Import without asking for confirmation")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    password: str | None,
    withdrawals_only: bool,
    skip_duplicates: bool,
    bank_name: str,
    yes: bool,
):
    """Import the transactions found in a statement."""
    db = ctx.obj["db"]
    service = StatementImportService(db)

    transactions = _parse_with_password_prompt(ctx, service, statement_file, password, withdrawals_only)
    if not transactions:
        click.echo("No transactions found in statement.")
        return

    names = {cat.id: cat.name for cat in CategoryService(db).list_categories()}
    _print_rows(transactions, names)
    _print_totals(service, transactions)

    if not yes:
        click.confirm("\nImport these transactions?", abort=True)

    created = service.import_selected(
        transactions, bank_name=bank_name, skip_duplicates=skip_duplicates
    )
    skipped = len(transactions) - len(created)
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {len(created)} transactions")
    click.echo(f"  Skipped: {skipped} duplicates")


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group, name="statement")
