"""Transaction domain service."""

import logging
from typing import Optional
from datetime import datetime
from decimal import Decimal

from spendtrack.database.base import Database
from spendtrack.domain.entities import Transaction as TransactionEntity, TransactionType
from spendtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing stored transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        amount: Decimal,
        merchant: str,
        timestamp: datetime,
        bank_name: str,
        transaction_type: TransactionType = TransactionType.DEBIT,
        category_id: Optional[int] = None,
        raw_source_text: str = "",
        account_last4: Optional[str] = None,
    ) -> int:
        """Create a transaction.

        Args:
            amount: Positive transaction amount
            merchant: Merchant or description text
            timestamp: When the transaction happened
            bank_name: Display name of the bank
            transaction_type: Direction of the money movement
            category_id: Optional category ID
            raw_source_text: SMS body or import marker the row came from
            account_last4: Optional last four digits of the account

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is not positive
            NotFoundError: If the category doesn't exist
        """
        if amount <= 0:
            raise ValidationError("Transaction amount must be positive")

        # Verify category if provided
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_transaction(
            amount=amount,
            merchant=merchant,
            timestamp=timestamp,
            bank_name=bank_name,
            transaction_type=transaction_type,
            category_id=category_id,
            raw_source_text=raw_source_text,
            account_last4=account_last4,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def _require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        category_name: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_time: Optional inclusive lower bound on timestamp
            end_time: Optional inclusive upper bound on timestamp
            category_name: Optional category name filter

        Returns:
            List of transaction entities

        Raises:
            NotFoundError: If the category name doesn't exist
        """
        category_id = None
        if category_name is not None:
            category = self.db.get_category_by_name(category_name)
            if category is None:
                raise NotFoundError(category_name_not_found(category_name))
            category_id = category.id
        return self.db.list_transactions(
            start_time=start_time, end_time=end_time, category_id=category_id
        )

    def categorize_manually(self, transaction_id: int, category_id: int) -> None:
        """Assign a category by hand.

        The transaction is flagged as manually edited, so later bulk
        recategorization passes leave it alone.

        Raises:
            NotFoundError: If the transaction or category doesn't exist
        """
        self._require_transaction(transaction_id)
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        self.db.update_transaction(
            transaction_id, category_id=category_id, is_manually_edited=True
        )

    def update_amount(self, transaction_id: int, amount: Decimal) -> None:
        """Correct a transaction amount by hand.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the amount is not positive
        """
        self._require_transaction(transaction_id)
        if amount <= 0:
            raise ValidationError("Transaction amount must be positive")
        self.db.update_transaction(transaction_id, amount=amount, is_manually_edited=True)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        self._require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)

    def delete_all_transactions(self) -> int:
        """Delete every transaction. Returns number deleted."""
        deleted = self.db.delete_all_transactions()
        logger.info("Deleted %d transactions", deleted)
        return deleted
