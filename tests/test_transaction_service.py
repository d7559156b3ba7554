"""Tests for the transaction service."""

import pytest
from datetime import datetime
from decimal import Decimal

from spendtrack.domain.entities import TransactionType
from spendtrack.domain.errors import NotFoundError, ValidationError
from spendtrack.utils.date_parser import month_range


def test_create_transaction(transaction_service, seeded_db):
    """Test creating a transaction."""
    txn_id = transaction_service.create_transaction(
        amount=Decimal("120.00"),
        merchant="STARBUCKS",
        timestamp=datetime(2024, 4, 3, 8, 15),
        bank_name="HDFC Bank",
        category_id=1,
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.merchant == "STARBUCKS"
    assert txn.transaction_type is TransactionType.DEBIT
    assert txn.category_id == 1


def test_create_transaction_validation(transaction_service, seeded_db):
    """Test non-positive amounts and unknown categories are rejected."""
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            amount=Decimal("0"), merchant="X", timestamp=datetime(2024, 4, 1), bank_name="Bank"
        )
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            amount=Decimal("1"), merchant="X", timestamp=datetime(2024, 4, 1), bank_name="Bank", category_id=99
        )


def test_categorize_manually_sets_flag(transaction_service, seeded_db, add_transaction):
    """Test manual categorization marks the transaction as edited."""
    txn_id = add_transaction("SOME SHOP", category_id=7)

    transaction_service.categorize_manually(txn_id, 3)

    txn = transaction_service.get_transaction(txn_id)
    assert txn.category_id == 3
    assert txn.is_manually_edited is True


def test_categorize_manually_errors(transaction_service, seeded_db, add_transaction):
    """Test missing transactions and categories."""
    txn_id = add_transaction("SOME SHOP")

    with pytest.raises(NotFoundError):
        transaction_service.categorize_manually(999, 1)
    with pytest.raises(NotFoundError):
        transaction_service.categorize_manually(txn_id, 999)


def test_update_amount(transaction_service, add_transaction):
    """Test amount corrections mark the transaction as edited."""
    txn_id = add_transaction("SOME SHOP", amount="10.00")

    transaction_service.update_amount(txn_id, Decimal("12.50"))

    txn = transaction_service.get_transaction(txn_id)
    assert txn.amount == Decimal("12.50")
    assert txn.is_manually_edited is True

    with pytest.raises(ValidationError):
        transaction_service.update_amount(txn_id, Decimal("-1"))


def test_list_transactions_filters(transaction_service, seeded_db, add_transaction):
    """Test month and category filters."""
    april_food = add_transaction("SWIGGY", category_id=1, timestamp=datetime(2024, 4, 10))
    add_transaction("UBER", category_id=2, timestamp=datetime(2024, 4, 11))
    add_transaction("SWIGGY", category_id=1, timestamp=datetime(2024, 5, 1))

    start, end = month_range(2024, 4)
    result = transaction_service.list_transactions(start_time=start, end_time=end, category_name="food")

    assert [txn.id for txn in result] == [april_food]

    with pytest.raises(NotFoundError):
        transaction_service.list_transactions(category_name="Travel")


def test_delete_transactions(transaction_service, add_transaction):
    """Test deleting one and all transactions."""
    first = add_transaction("A")
    add_transaction("B")

    transaction_service.delete_transaction(first)
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(first)

    assert transaction_service.delete_all_transactions() == 1
