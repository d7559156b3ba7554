"""Domain model entities for spendtrack.

These are pure data classes representing business concepts, independent of
database schema. Parse results (ParsedSmsTransaction, PdfTransaction) are
ephemeral and are converted into new Transaction rows on import; they never
share identity with persisted entities.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class MatchType(str, Enum):
    """How a rule pattern is compared against a merchant string."""

    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    EXACT = "EXACT"
    REGEX = "REGEX"


class TransactionType(str, Enum):
    """Direction of money movement."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    color: str
    icon: str
    is_default: bool = False
    display_order: int = 0


@dataclass(frozen=True)
class Rule:
    """Categorization rule domain entity."""

    id: int
    category_id: int
    pattern: str
    match_type: MatchType
    priority: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction domain entity."""

    id: int
    amount: Decimal
    merchant: str
    category_id: Optional[int]
    timestamp: datetime
    raw_source_text: str
    bank_name: str
    account_last4: Optional[str]
    transaction_type: TransactionType
    is_manually_edited: bool = False


@dataclass(frozen=True)
class ParsedSmsTransaction:
    """Transaction extracted from a single bank SMS."""

    amount: Decimal
    merchant: str
    transaction_type: TransactionType
    timestamp: datetime
    account_last4: Optional[str]
    bank_name: str
    raw_text: str


@dataclass(frozen=True)
class PdfTransaction:
    """Transaction row recovered from a bank statement.

    Exactly one of debit_amount/credit_amount is set for every emitted row.
    Review flags are updated with dataclasses.replace().
    """

    original_date_text: str
    timestamp: datetime
    description: str
    debit_amount: Optional[Decimal]
    credit_amount: Optional[Decimal]
    running_balance: Decimal
    is_selected: bool = True
    suggested_category_id: Optional[int] = None
    is_duplicate: bool = False

    @property
    def amount(self) -> Decimal:
        if self.debit_amount is not None:
            return self.debit_amount
        if self.credit_amount is not None:
            return self.credit_amount
        return Decimal("0")

    @property
    def is_debit(self) -> bool:
        return self.debit_amount is not None

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.DEBIT if self.is_debit else TransactionType.CREDIT


@dataclass(frozen=True)
class CategoryExpense:
    """Spending total for one category over a period."""

    category: Category
    total_amount: Decimal
    percentage: float
    transaction_count: int
