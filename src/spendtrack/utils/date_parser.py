"""Date parsing utilities."""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Leading date token of a statement row: 01/04/24, 01-04-2024, ...
STATEMENT_DATE_RE = re.compile(r"\d{2}[/-]\d{2}[/-]\d{2,4}")

STATEMENT_DATE_FORMATS = ("%d/%m/%y", "%d/%m/%Y", "%d-%m-%Y", "%d-%m-%y")


def parse_statement_date(date_str: str) -> Optional[datetime]:
    """Parse a statement date token.

    Two-digit years are anchored to the 2000s ("01/04/85" is 2085).

    Args:
        date_str: Date token such as "01/04/24"

    Returns:
        Datetime at midnight, or None if no format matches
    """
    date_str = date_str.strip()
    for fmt in STATEMENT_DATE_FORMATS:
        try:
            parsed = datetime.strptime(date_str, fmt)
        except ValueError:
            continue
        if fmt.endswith("%y") and parsed.year < 2000:
            parsed = parsed.replace(year=parsed.year + 100)
        return parsed
    return None


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports "today", "yesterday" and absolute dates in any format
    dateutil understands ("2024-01-15", "15 Jan 2024", ...). Ambiguous
    numeric dates are read day first, as bank statements print them.

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)

    try:
        # ISO dates stay year-first; everything else is day-first
        if re.fullmatch(r"\d{4}-\d{2}-\d{2}", date_str):
            return date.fromisoformat(date_str)
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse "YYYY-MM" into (year, month).

    Raises:
        ValueError: If the string is not a valid month
    """
    match = re.fullmatch(r"(\d{4})-(\d{1,2})", month_str.strip())
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}', expected YYYY-MM")
    return year, month


def day_range(day: date) -> tuple[datetime, datetime]:
    """Return the first and last instant of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the first and last instant of a calendar month."""
    start = datetime(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(microseconds=1)
    return start, end
