"""Bulk re-categorization of stored transactions after rule changes."""

import logging
import threading
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain.categorization import CategorizationEngine, match_pattern
from spendtrack.domain.entities import MatchType, Rule

logger = logging.getLogger(__name__)

# At most one bulk pass may run at a time.
_bulk_pass_lock = threading.Lock()


class BulkRecategorizer:
    """Re-applies categorization rules across the stored transactions."""

    def __init__(self, db: Database, engine: Optional[CategorizationEngine] = None):
        """Initialize recategorizer.

        Args:
            db: Database instance
            engine: Categorization engine, created from db if not given
        """
        self.db = db
        self.engine = engine or CategorizationEngine(db)

    def count_matching(self, pattern: str, match_type: MatchType) -> int:
        """Count stored transactions whose merchant matches a pattern."""
        return sum(
            1 for txn in self.db.list_transactions() if match_pattern(txn.merchant, pattern, match_type)
        )

    def recategorize_matching(self, rule: Rule) -> int:
        """Move every transaction matching a rule into the rule's category.

        Matching transactions lose their manual-edit flag, since the user
        asked for the rule to apply to them.

        Returns:
            Number of transactions updated
        """
        with _bulk_pass_lock:
            updated = 0
            for txn in self.db.list_transactions():
                if not self.engine.matches(txn.merchant, rule):
                    continue
                self.db.update_transaction(
                    txn.id,
                    category_id=rule.category_id,
                    is_manually_edited=False,
                )
                updated += 1
            logger.info("Recategorized %d transactions for rule %r", updated, rule.pattern)
            return updated

    def recategorize_all(self) -> int:
        """Re-run categorization on every transaction not edited by hand.

        Returns:
            Number of transactions whose category changed
        """
        with _bulk_pass_lock:
            candidates = [txn for txn in self.db.list_transactions() if not txn.is_manually_edited]
            new_categories = self.engine.categorize_many(txn.merchant for txn in candidates)

            updated = 0
            for txn, category_id in zip(candidates, new_categories):
                if category_id == txn.category_id:
                    continue
                self.db.update_transaction(txn.id, category_id=category_id)
                updated += 1
            logger.info("Recategorized %d transactions", updated)
            return updated
