"""Tests for date parsing utilities."""

import pytest
from datetime import date, datetime, timedelta
from spendtrack.utils.date_parser import (
    day_range,
    month_range,
    parse_date,
    parse_month,
    parse_statement_date,
)


def test_parse_absolute_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_day_first_date():
    """Test numeric dates are read day first."""
    assert parse_date("05/06/2024") == date(2024, 6, 5)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_invalid_date():
    """Test invalid date raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("01/04/24", datetime(2024, 4, 1)),
        ("15/08/2023", datetime(2023, 8, 15)),
        ("31-12-2024", datetime(2024, 12, 31)),
        ("07-03-25", datetime(2025, 3, 7)),
    ],
)
def test_parse_statement_date(text, expected):
    """Test the statement date formats."""
    assert parse_statement_date(text) == expected


def test_statement_two_digit_year_in_2000s():
    """Test two-digit years never land in the 1900s."""
    assert parse_statement_date("01/01/85").year == 2085


def test_parse_statement_date_invalid():
    """Test an impossible date yields None."""
    assert parse_statement_date("32/13/24") is None
    assert parse_statement_date("Opening") is None


def test_parse_month():
    """Test parsing YYYY-MM."""
    assert parse_month("2024-04") == (2024, 4)
    with pytest.raises(ValueError):
        parse_month("2024-13")
    with pytest.raises(ValueError):
        parse_month("April")


def test_month_range():
    """Test month range covers the whole month."""
    start, end = month_range(2024, 2)
    assert start == datetime(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)
    assert end < datetime(2024, 3, 1)


def test_day_range():
    """Test day range covers the whole day."""
    start, end = day_range(date(2024, 4, 5))
    assert start == datetime(2024, 4, 5)
    assert end.date() == date(2024, 4, 5)
    assert end < datetime(2024, 4, 6)
