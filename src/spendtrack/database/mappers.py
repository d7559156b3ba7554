"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum and Decimal handling
lives in one place.
"""

from decimal import Decimal

from spendtrack.domain import entities as domain
from spendtrack.database.models import (
    Category as ORMCategory,
    Rule as ORMRule,
    Transaction as ORMTransaction,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        color=orm_category.color,
        icon=orm_category.icon,
        is_default=bool(orm_category.is_default),
        display_order=orm_category.display_order or 0,
    )


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model to domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        category_id=orm_rule.category_id,
        pattern=orm_rule.pattern,
        match_type=domain.MatchType(orm_rule.match_type),
        priority=orm_rule.priority or 0,
        is_active=bool(orm_rule.is_active),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=Decimal(orm_transaction.amount),
        merchant=orm_transaction.merchant,
        category_id=orm_transaction.category_id,
        timestamp=orm_transaction.timestamp,
        raw_source_text=orm_transaction.raw_source_text or "",
        bank_name=orm_transaction.bank_name,
        account_last4=orm_transaction.account_last4,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        is_manually_edited=bool(orm_transaction.is_manually_edited),
    )
