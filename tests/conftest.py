"""Shared pytest fixtures for spendtrack tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
import pytest

from spendtrack.database.factories import create_sqlite_database
from spendtrack.domain.categorization import CategorizationEngine
from spendtrack.domain.category import CategoryService
from spendtrack.domain.entities import TransactionType
from spendtrack.domain.rule import RuleService
from spendtrack.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def engine(temp_db):
    """Create a CategorizationEngine with a temporary database."""
    return CategorizationEngine(temp_db)


@pytest.fixture
def seeded_db(temp_db, category_service):
    """Temporary database holding the default categories and rules."""
    category_service.seed_defaults()
    return temp_db


@pytest.fixture
def add_transaction(temp_db):
    """Return a helper that stores a transaction with sensible defaults."""

    def _add(
        merchant: str,
        amount: str = "100.00",
        category_id: int | None = None,
        timestamp: datetime | None = None,
        transaction_type: TransactionType = TransactionType.DEBIT,
        is_manually_edited: bool = False,
    ) -> int:
        return temp_db.create_transaction(
            amount=Decimal(amount),
            merchant=merchant,
            timestamp=timestamp or datetime(2024, 4, 1, 10, 0),
            bank_name="HDFC Bank",
            transaction_type=transaction_type,
            category_id=category_id,
            raw_source_text=f"test {merchant}",
            account_last4="1234",
            is_manually_edited=is_manually_edited,
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
