"""Post-insert notifications for ingested transactions."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from spendtrack.domain.categorization import DEFAULT_CATEGORY_ID, DEFAULT_CATEGORY_NAME
from spendtrack.domain.entities import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """What the user is told about a newly recorded transaction."""

    merchant: str
    amount: Decimal
    category_name: str
    needs_categorization: bool

    @property
    def title(self) -> str:
        if self.needs_categorization:
            return "New transaction needs a category"
        return f"New {self.category_name} expense"

    @property
    def message(self) -> str:
        return f"₹{self.amount:,.2f} at {self.merchant}"


class Notifier(Protocol):
    """Delivers notifications to the user."""

    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Notifier that writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        logger.info("%s: %s", notification.title, notification.message)


def build_notification(
    merchant: str,
    amount: Decimal,
    category_id: int,
    category: Optional[Category],
    default_category_id: int = DEFAULT_CATEGORY_ID,
) -> Notification:
    """Pick the notification variant for a stored transaction.

    Transactions left in the default category ask the user to categorize
    them; everything else is a plain spending alert.
    """
    needs_categorization = category_id == default_category_id
    category_name = category.name if category is not None else DEFAULT_CATEGORY_NAME
    return Notification(
        merchant=merchant,
        amount=amount,
        category_name=category_name,
        needs_categorization=needs_categorization,
    )
