"""Rule-based merchant categorization."""

import logging
import re
from typing import Iterable, Optional

from spendtrack.database.base import Database
from spendtrack.domain.entities import MatchType, Rule

logger = logging.getLogger(__name__)

# Seeded "Others" category; also the target of "needs categorization" alerts.
DEFAULT_CATEGORY_ID = 7
DEFAULT_CATEGORY_NAME = "Others"


def match_pattern(merchant: str, pattern: str, match_type: MatchType) -> bool:
    """Check whether a merchant string matches a rule pattern.

    Plain match types compare upper-cased operands. REGEX searches the
    original-case merchant case-insensitively; an invalid expression never
    matches.
    """
    if match_type == MatchType.REGEX:
        try:
            return re.search(pattern, merchant, re.IGNORECASE) is not None
        except re.error as e:
            logger.warning("Invalid regex pattern %r: %s", pattern, e)
            return False

    merchant_upper = merchant.upper()
    pattern_upper = pattern.upper()

    if match_type == MatchType.CONTAINS:
        return pattern_upper in merchant_upper
    if match_type == MatchType.STARTS_WITH:
        return merchant_upper.startswith(pattern_upper)
    if match_type == MatchType.ENDS_WITH:
        return merchant_upper.endswith(pattern_upper)
    if match_type == MatchType.EXACT:
        return merchant_upper == pattern_upper
    raise ValueError(f"Unknown match type: {match_type}")


def order_rules(rules: Iterable[Rule]) -> list[Rule]:
    """Return active rules in evaluation order.

    Priority descending; equal priorities keep ascending rule id order.
    """
    active = sorted((rule for rule in rules if rule.is_active), key=lambda rule: rule.id)
    # sorted() is stable, so the id order survives for equal priorities
    return sorted(active, key=lambda rule: -rule.priority)


def select_category(
    ordered_rules: list[Rule], merchant: str, default_category_id: int = DEFAULT_CATEGORY_ID
) -> int:
    """Return the category of the first matching rule, or the default."""
    for rule in ordered_rules:
        if CategorizationEngine.matches(merchant, rule):
            logger.debug("Matched rule %r -> category %d", rule.pattern, rule.category_id)
            return rule.category_id
    logger.debug("No matching rule for %r, using default category", merchant)
    return default_category_id


class CategorizationEngine:
    """Assigns categories to merchant strings using stored rules."""

    def __init__(self, db: Database, default_category_id: int = DEFAULT_CATEGORY_ID):
        """Initialize categorization engine.

        Args:
            db: Database instance providing the rules
            default_category_id: Category returned when no rule matches
        """
        self.db = db
        self.default_category_id = default_category_id

    def active_rules(self) -> list[Rule]:
        """Load active rules in evaluation order."""
        return order_rules(self.db.list_rules(active_only=True))

    def categorize(self, merchant: str) -> int:
        """Return the category ID for a merchant string.

        Args:
            merchant: Merchant or statement description text

        Returns:
            Category ID of the first matching rule, or the default category
        """
        return select_category(self.active_rules(), merchant, self.default_category_id)

    def categorize_many(self, merchants: Iterable[str]) -> list[int]:
        """Categorize several merchants against a single snapshot of the rules."""
        rules = self.active_rules()
        return [select_category(rules, merchant, self.default_category_id) for merchant in merchants]

    def is_default(self, category_id: Optional[int]) -> bool:
        """Check whether a category ID is the fallback category."""
        return category_id == self.default_category_id

    @staticmethod
    def matches(merchant: str, rule: Rule) -> bool:
        """Check whether a merchant matches a stored rule."""
        return match_pattern(merchant, rule.pattern, rule.match_type)

    @staticmethod
    def test_rule(merchant: str, pattern: str, match_type: MatchType) -> bool:
        """Try a pattern against a merchant before saving it as a rule."""
        candidate = Rule(id=0, category_id=0, pattern=pattern, match_type=match_type)
        return CategorizationEngine.matches(merchant, candidate)
