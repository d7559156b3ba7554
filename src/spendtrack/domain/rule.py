"""Categorization rule domain service."""

import logging
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain.categorization import CategorizationEngine
from spendtrack.domain.entities import MatchType, Rule
from spendtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    rule_not_found,
)
from spendtrack.domain.recategorize import BulkRecategorizer

logger = logging.getLogger(__name__)


class RuleService:
    """Service for managing categorization rules.

    Rule changes keep stored transactions in step: adding a rule can
    recategorize its matches, changing a rule's category moves its matches,
    and deleting a rule re-runs categorization over everything not edited
    by hand.
    """

    def __init__(
        self,
        db: Database,
        engine: Optional[CategorizationEngine] = None,
        recategorizer: Optional[BulkRecategorizer] = None,
    ):
        """Initialize rule service.

        Args:
            db: Database instance
            engine: Categorization engine, created from db if not given
            recategorizer: Bulk recategorizer, created from db if not given
        """
        self.db = db
        self.engine = engine or CategorizationEngine(db)
        self.recategorizer = recategorizer or BulkRecategorizer(db, self.engine)

    def _validate(self, category_id: int, pattern: str) -> None:
        if not pattern.strip():
            raise ValidationError("Rule pattern cannot be empty")
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def get_rule(self, rule_id: int) -> Rule:
        """Get rule by ID.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def list_rules(self, active_only: bool = False, category_id: Optional[int] = None) -> list[Rule]:
        """List rules in evaluation order."""
        return self.db.list_rules(active_only=active_only, category_id=category_id)

    def add_rule(
        self,
        category_id: int,
        pattern: str,
        match_type: MatchType = MatchType.CONTAINS,
        priority: int = 0,
        recategorize: bool = False,
    ) -> tuple[int, int]:
        """Add a rule.

        Args:
            category_id: Target category ID
            pattern: Pattern to match against merchant text
            match_type: How the pattern is compared
            priority: Higher priorities are evaluated first
            recategorize: If True, move existing matching transactions into
                the rule's category

        Returns:
            Tuple of (rule ID, number of transactions recategorized)

        Raises:
            ValidationError: If the pattern is empty
            NotFoundError: If the category doesn't exist
        """
        pattern = pattern.strip()
        self._validate(category_id, pattern)
        rule_id = self.db.create_rule(
            category_id=category_id,
            pattern=pattern,
            match_type=match_type,
            priority=priority,
        )
        logger.info("Added rule %d: %s %r -> category %d", rule_id, match_type.value, pattern, category_id)

        updated = 0
        if recategorize:
            updated = self.recategorizer.recategorize_matching(self.get_rule(rule_id))
        return rule_id, updated

    def count_affected(
        self,
        rule_id: int,
        category_id: Optional[int],
        pattern: Optional[str] = None,
        match_type: Optional[MatchType] = None,
    ) -> int:
        """Count transactions an edit would move to another category.

        Only a category change moves transactions; any other edit affects
        nothing. Matches are counted with the edited pattern and match type,
        falling back to the stored ones where they are not being changed.
        """
        rule = self.get_rule(rule_id)
        if category_id is None or category_id == rule.category_id:
            return 0
        if pattern is not None:
            pattern = pattern.strip()
        return self.recategorizer.count_matching(
            pattern or rule.pattern, match_type or rule.match_type
        )

    def update_rule(
        self,
        rule_id: int,
        category_id: Optional[int] = None,
        pattern: Optional[str] = None,
        match_type: Optional[MatchType] = None,
        priority: Optional[int] = None,
        recategorize: bool = True,
    ) -> int:
        """Update a rule.

        When the category changes and recategorize is True, transactions
        matching the updated rule are moved into the new category.

        Returns:
            Number of transactions recategorized

        Raises:
            NotFoundError: If the rule or new category doesn't exist
            ValidationError: If the new pattern is empty
        """
        current = self.get_rule(rule_id)
        if pattern is not None:
            pattern = pattern.strip()
        self._validate(
            category_id if category_id is not None else current.category_id,
            pattern if pattern is not None else current.pattern,
        )

        self.db.update_rule(
            rule_id,
            category_id=category_id,
            pattern=pattern,
            match_type=match_type,
            priority=priority,
        )

        category_changed = category_id is not None and category_id != current.category_id
        if category_changed and recategorize:
            return self.recategorizer.recategorize_matching(self.get_rule(rule_id))
        return 0

    def set_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule.

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        self.get_rule(rule_id)
        self.db.update_rule(rule_id, is_active=is_active)

    def toggle_active(self, rule_id: int) -> bool:
        """Flip a rule's active flag. Returns the new state."""
        rule = self.get_rule(rule_id)
        self.db.update_rule(rule_id, is_active=not rule.is_active)
        return not rule.is_active

    def delete_rule(self, rule_id: int) -> int:
        """Delete a rule and re-run categorization.

        Returns:
            Number of transactions whose category changed

        Raises:
            NotFoundError: If the rule doesn't exist
        """
        self.get_rule(rule_id)
        self.db.delete_rule(rule_id)
        logger.info("Deleted rule %d", rule_id)
        return self.recategorizer.recategorize_all()

    def test_rule(self, merchant: str, pattern: str, match_type: MatchType) -> bool:
        """Check a pattern against sample merchant text without saving it."""
        return self.engine.test_rule(merchant, pattern, match_type)

    def count_matching(self, pattern: str, match_type: MatchType) -> int:
        """Count stored transactions a pattern would match."""
        return self.recategorizer.count_matching(pattern, match_type)
