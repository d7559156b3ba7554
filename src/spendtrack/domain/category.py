"""Category domain service."""

import logging
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain.categorization import DEFAULT_CATEGORY_ID
from spendtrack.domain.entities import Category, MatchType
from spendtrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_not_found,
    default_category_delete_blocked,
)

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_COLOR = "#607D8B"
DEFAULT_CUSTOM_ICON = "🏷️"

# (id, name, color, icon)
DEFAULT_CATEGORIES = [
    (1, "Food", "#FF9800", "🍔"),
    (2, "Transport", "#2196F3", "🚗"),
    (3, "Shopping", "#9C27B0", "🛍️"),
    (4, "Bills", "#F44336", "💡"),
    (5, "Entertainment", "#E91E63", "🎬"),
    (6, "Health", "#4CAF50", "⚕️"),
    (DEFAULT_CATEGORY_ID, "Others", "#9E9E9E", "📦"),
]

# (category_id, pattern, priority); all seeded rules are CONTAINS
DEFAULT_RULES = [
    (1, "ZOMATO", 100),
    (1, "SWIGGY", 100),
    (1, "DOMINOS", 100),
    (1, "MCDONALDS", 100),
    (1, "KFC", 100),
    (1, "PIZZA HUT", 100),
    (1, "STARBUCKS", 100),
    (1, "CAFE", 90),
    (1, "RESTAURANT", 90),
    (2, "UBER", 100),
    (2, "OLA", 100),
    (2, "RAPIDO", 100),
    (2, "PETROL", 100),
    (2, "FUEL", 100),
    (2, "PARKING", 100),
    (3, "AMAZON", 100),
    (3, "FLIPKART", 100),
    (3, "MYNTRA", 100),
    (3, "AJIO", 100),
    (3, "MEESHO", 100),
    (4, "ELECTRICITY", 100),
    (4, "WATER", 100),
    (4, "INTERNET", 100),
    (4, "MOBILE", 100),
    (4, "RECHARGE", 100),
    (5, "NETFLIX", 100),
    (5, "PRIME", 100),
    (5, "HOTSTAR", 100),
    (5, "SPOTIFY", 100),
    (5, "BOOKMYSHOW", 100),
    (5, "MOVIE", 90),
    (6, "PHARMACY", 100),
    (6, "HOSPITAL", 100),
    (6, "CLINIC", 100),
    (6, "APOLLO", 100),
    (6, "MEDPLUS", 100),
]


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        color: str = DEFAULT_CUSTOM_COLOR,
        icon: str = DEFAULT_CUSTOM_ICON,
    ) -> int:
        """Create a custom category.

        New categories are appended after the existing ones in display order.

        Args:
            name: Category name
            color: Hex color, e.g. "#607D8B"
            icon: Display icon

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a category with that name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category with name '{name}' already exists")

        existing = self.db.list_categories()
        display_order = max((cat.display_order for cat in existing), default=0) + 1
        return self.db.create_category(
            name=name, color=color, icon=icon, display_order=display_order
        )

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name, ignoring case."""
        return self.db.get_category_by_name(name)

    def require_category(self, name: str) -> Category:
        """Get category by name.

        Raises:
            NotFoundError: If no category has that name
        """
        category = self.db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(category_name_not_found(name))
        return category

    def list_categories(self) -> list[Category]:
        """List categories in display order."""
        return self.db.list_categories()

    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update category name, color or icon.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        self.db.update_category(category_id, name=name, color=color, icon=icon)

    def delete_category(self, category_id: int) -> None:
        """Delete a custom category.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If the category is one of the defaults
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.is_default:
            raise ValidationError(default_category_delete_blocked(category.name))
        self.db.delete_category(category_id)

    def delete_custom_categories(self) -> int:
        """Delete every non-default category. Returns number deleted."""
        deleted = self.db.delete_non_default_categories()
        logger.info("Deleted %d custom categories", deleted)
        return deleted

    def seed_defaults(self) -> tuple[int, int]:
        """Create the default categories and rules.

        Categories that already exist are left alone. Rules are seeded only
        when the rule table is empty, so running this twice is harmless.

        Returns:
            Tuple of (categories created, rules created)
        """
        categories_created = 0
        for order, (category_id, name, color, icon) in enumerate(DEFAULT_CATEGORIES, start=1):
            if self.db.get_category(category_id) is not None:
                continue
            if self.db.get_category_by_name(name) is not None:
                logger.warning("Category %r exists with another ID, not seeding it", name)
                continue
            self.db.create_category(
                name=name,
                color=color,
                icon=icon,
                is_default=True,
                display_order=order,
                category_id=category_id,
            )
            categories_created += 1

        rules_created = 0
        if not self.db.list_rules():
            for category_id, pattern, priority in DEFAULT_RULES:
                self.db.create_rule(
                    category_id=category_id,
                    pattern=pattern,
                    match_type=MatchType.CONTAINS,
                    priority=priority,
                )
                rules_created += 1

        logger.info("Seeded %d categories and %d rules", categories_created, rules_created)
        return categories_created, rules_created
