"""Duplicate detection for statement imports."""

from dataclasses import replace
from datetime import timedelta
from typing import Iterable, Optional

from spendtrack.database.base import Database
from spendtrack.domain.entities import PdfTransaction, Transaction
from spendtrack.utils.amount_parser import amounts_equal

DUPLICATE_WINDOW = timedelta(hours=24)


def is_duplicate_of(candidate: PdfTransaction, existing: Transaction) -> bool:
    """Check the (time window, merchant, amount) key against one stored transaction."""
    return (
        abs(existing.timestamp - candidate.timestamp) < DUPLICATE_WINDOW
        and existing.merchant.casefold() == candidate.description.casefold()
        and amounts_equal(existing.amount, candidate.amount)
    )


class DuplicateDetector:
    """Flags parsed statement rows that are already stored."""

    def __init__(self, db: Database):
        """Initialize duplicate detector.

        Args:
            db: Database instance
        """
        self.db = db

    def mark_duplicates(
        self,
        transactions: list[PdfTransaction],
        existing: Optional[Iterable[Transaction]] = None,
    ) -> list[PdfTransaction]:
        """Return copies of the transactions with is_duplicate set.

        Args:
            transactions: Newly parsed transactions
            existing: Stored transactions to compare against. Defaults to a
                single snapshot of the whole store.

        Returns:
            New list in the same order
        """
        snapshot = list(existing) if existing is not None else self.db.list_transactions()
        return [
            replace(txn, is_duplicate=any(is_duplicate_of(txn, stored) for stored in snapshot))
            for txn in transactions
        ]
