"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from spendtrack.domain.entities import (
    Category,
    MatchType,
    Rule,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for spendtrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        color: str,
        icon: str,
        is_default: bool = False,
        display_order: int = 0,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a category. Returns category ID.

        category_id pins the ID, used when seeding the default set.
        """
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name, ignoring case."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List categories by display order, then name."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> None:
        """Update category fields that are not None."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def delete_non_default_categories(self) -> int:
        """Delete every non-default category. Returns number deleted."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(
        self,
        category_id: int,
        pattern: str,
        match_type: MatchType,
        priority: int = 0,
        is_active: bool = True,
    ) -> int:
        """Create a rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = False, category_id: Optional[int] = None) -> list[Rule]:
        """List rules by priority descending, then ID ascending."""
        pass

    @abstractmethod
    def update_rule(
        self,
        rule_id: int,
        category_id: Optional[int] = None,
        pattern: Optional[str] = None,
        match_type: Optional[MatchType] = None,
        priority: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update rule fields that are not None."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass

    @abstractmethod
    def delete_all_rules(self) -> int:
        """Delete every rule. Returns number deleted."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        amount: Decimal,
        merchant: str,
        timestamp: datetime,
        bank_name: str,
        transaction_type: TransactionType,
        category_id: Optional[int] = None,
        raw_source_text: str = "",
        account_last4: Optional[str] = None,
        is_manually_edited: bool = False,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        category_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            start_time: Optional inclusive lower bound on timestamp
            end_time: Optional inclusive upper bound on timestamp
            category_id: Optional category ID filter
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        amount: Optional[Decimal] = None,
        merchant: Optional[str] = None,
        category_id: Optional[int] = None,
        is_manually_edited: Optional[bool] = None,
    ) -> None:
        """Update transaction fields that are not None."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def delete_all_transactions(self) -> int:
        """Delete every transaction. Returns number deleted."""
        pass
