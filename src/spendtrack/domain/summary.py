"""Spending summary domain service."""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain.entities import CategoryExpense, Transaction, TransactionType


class SummaryService:
    """Service for building spending totals over a period.

    Only DEBIT transactions count as spending.
    """

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def _expenses(
        self, start_time: Optional[datetime], end_time: Optional[datetime]
    ) -> list[Transaction]:
        return [
            txn
            for txn in self.db.list_transactions(start_time=start_time, end_time=end_time)
            if txn.transaction_type == TransactionType.DEBIT
        ]

    def total_expenses(
        self, start_time: Optional[datetime] = None, end_time: Optional[datetime] = None
    ) -> Decimal:
        """Sum of debit amounts in the period."""
        return sum((txn.amount for txn in self._expenses(start_time, end_time)), Decimal("0"))

    def category_expenses(
        self, start_time: Optional[datetime] = None, end_time: Optional[datetime] = None
    ) -> list[CategoryExpense]:
        """Per-category spending in the period.

        Args:
            start_time: Optional inclusive lower bound
            end_time: Optional inclusive upper bound

        Returns:
            One entry per category with spending, largest total first.
            Uncategorized debits and debits in deleted categories are
            left out of the per-category list but still count towards the
            percentage base.
        """
        expenses = self._expenses(start_time, end_time)
        grand_total = sum((txn.amount for txn in expenses), Decimal("0"))

        totals: dict[int, Decimal] = defaultdict(lambda: Decimal("0"))
        counts: dict[int, int] = defaultdict(int)
        for txn in expenses:
            if txn.category_id is None:
                continue
            totals[txn.category_id] += txn.amount
            counts[txn.category_id] += 1

        categories = {cat.id: cat for cat in self.db.list_categories()}
        result = []
        for category_id, total in totals.items():
            category = categories.get(category_id)
            if category is None:
                continue
            percentage = float(total / grand_total * 100) if grand_total > 0 else 0.0
            result.append(
                CategoryExpense(
                    category=category,
                    total_amount=total,
                    percentage=percentage,
                    transaction_count=counts[category_id],
                )
            )

        result.sort(key=lambda item: item.total_amount, reverse=True)
        return result
