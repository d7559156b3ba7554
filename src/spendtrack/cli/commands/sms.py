"""Bank SMS commands."""

import click
from spendtrack.domain.notifications import Notification
from spendtrack.domain.sms_ingest import IngestStatus, SmsIngestService
from spendtrack.domain.sms_parser import SmsTransactionParser


class EchoNotifier:
    """Prints notifications to the terminal."""

    def notify(self, notification: Notification) -> None:
        click.echo(f"{notification.title}: {notification.message}")


STATUS_MESSAGES = {
    IngestStatus.DUPLICATE: "Ignored: message already processed",
    IngestStatus.NOT_BANK: "Ignored: sender is not a known bank",
    IngestStatus.NOT_TRANSACTION: "Ignored: not a transaction message",
    IngestStatus.SKIPPED_CREDIT: "Ignored: credit transactions are not recorded",
}


@click.group()
def sms_group():
    """Parse and record bank SMS alerts."""
    pass


@sms_group.command("check")
@click.argument("sender")
@click.argument("body")
def check_sms(sender: str, body: str):
    """Show what would be extracted from an SMS without storing it."""
    parser = SmsTransactionParser()

    if not parser.is_bank_sms(sender):
        click.echo(f"Sender '{sender}' is not a known bank.")
    parsed = parser.parse(body, sender)
    if parsed is None:
        click.echo("Not a transaction message.")
        return

    click.echo(f"  Type: {parsed.transaction_type.value}")
    click.echo(f"  Amount: ₹{parsed.amount:,.2f}")
    click.echo(f"  Merchant: {parsed.merchant}")
    click.echo(f"  Bank: {parsed.bank_name}")
    if parsed.account_last4:
        click.echo(f"  Account: XX{parsed.account_last4}")


@sms_group.command("ingest")
@click.argument("sender")
@click.argument("body")
@click.option("--record-credits", is_flag=True, help="Also record credit transactions")
@click.pass_context
def ingest_sms(ctx, sender: str, body: str, record_credits: bool):
    """Record the transaction in a bank SMS.

    Example:
        spendtrack sms ingest VM-HDFCBK "Rs.250.00 debited from A/c XX1234 at SWIGGY"
    """
    db = ctx.obj["db"]
    service = SmsIngestService(db, notifier=EchoNotifier(), record_credits=record_credits)

    result = service.ingest(sender, body)
    if not result.recorded:
        click.echo(STATUS_MESSAGES[result.status])
        return

    click.echo(f"Recorded transaction {result.transaction_id}")


def register_commands(cli):
    """Register sms commands with main CLI."""
    cli.add_command(sms_group, name="sms")
