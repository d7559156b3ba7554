"""Tests for the spending summary service."""

import pytest
from datetime import datetime
from decimal import Decimal

from spendtrack.domain.entities import TransactionType
from spendtrack.domain.summary import SummaryService
from spendtrack.utils.date_parser import month_range


@pytest.fixture
def summary_service(seeded_db):
    return SummaryService(seeded_db)


def test_empty_summary(summary_service):
    """Test an empty store."""
    assert summary_service.total_expenses() == Decimal("0")
    assert summary_service.category_expenses() == []


def test_category_expenses(summary_service, add_transaction):
    """Test per-category totals, percentages and ordering."""
    add_transaction("SWIGGY", amount="300.00", category_id=1, timestamp=datetime(2024, 4, 2))
    add_transaction("ZOMATO", amount="100.00", category_id=1, timestamp=datetime(2024, 4, 3))
    add_transaction("UBER", amount="600.00", category_id=2, timestamp=datetime(2024, 4, 4))
    add_transaction(
        "SALARY",
        amount="50000.00",
        category_id=7,
        timestamp=datetime(2024, 4, 1),
        transaction_type=TransactionType.CREDIT,
    )
    add_transaction("SWIGGY", amount="999.00", category_id=1, timestamp=datetime(2024, 5, 1))

    start, end = month_range(2024, 4)
    expenses = summary_service.category_expenses(start, end)

    assert summary_service.total_expenses(start, end) == Decimal("1000.00")
    assert [item.category.name for item in expenses] == ["Transport", "Food"]
    assert expenses[0].total_amount == Decimal("600.00")
    assert expenses[0].percentage == pytest.approx(60.0)
    assert expenses[1].transaction_count == 2
    assert expenses[1].percentage == pytest.approx(40.0)
