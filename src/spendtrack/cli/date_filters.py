"""CLI helpers for date range resolution."""

from datetime import date, datetime

import click

from spendtrack.utils.date_parser import day_range, month_range, parse_date, parse_month


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    month: str | None = None,
    today: bool = False,
    default_to_this_month: bool = False,
) -> tuple[datetime | None, datetime | None]:
    """Resolve CLI date options into an inclusive datetime range."""
    period_count = sum(1 for is_set in (month, today) if is_set)

    if period_count > 1:
        click.echo("Error: Only one of --month and --today can be specified at a time.", err=True)
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: --month and --today cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if today:
        return day_range(date.today())

    if month:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        return month_range(year, month_number)

    start = None
    end = None
    if start_date:
        try:
            start = day_range(parse_date(start_date))[0]
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = day_range(parse_date(end_date))[1]
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None and default_to_this_month:
        current = date.today()
        return month_range(current.year, current.month)

    return start, end
