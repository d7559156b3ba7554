"""SMS ingestion: dedup, parse, categorize, store, notify."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from spendtrack.database.base import Database
from spendtrack.domain.categorization import CategorizationEngine
from spendtrack.domain.entities import ParsedSmsTransaction, TransactionType
from spendtrack.domain.notifications import LoggingNotifier, Notifier, build_notification
from spendtrack.domain.sms_parser import SmsTransactionParser

logger = logging.getLogger(__name__)

DEDUP_WINDOW = timedelta(seconds=60)


class RecentMessageCache:
    """Remembers recently seen messages to drop repeated deliveries.

    A message is identified by sender, delivery timestamp and body. Entries
    older than the window are pruned whenever the cache is consulted.
    """

    def __init__(
        self,
        window: timedelta = DEDUP_WINDOW,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.window = window
        self.clock = clock
        self._seen: dict[str, datetime] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(sender: str, received_at: datetime, body: str) -> str:
        return f"{sender}_{received_at.timestamp()}_{body}"

    def check_and_add(self, key: str) -> bool:
        """Record a key.

        Returns:
            True if the key is new, False if it was seen within the window
        """
        with self._lock:
            now = self.clock()
            self._seen = {k: seen for k, seen in self._seen.items() if now - seen < self.window}
            if key in self._seen:
                return False
            self._seen[key] = now
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)


class IngestStatus(str, Enum):
    """Outcome of handing one SMS to the ingestion service."""

    DUPLICATE = "duplicate"
    NOT_BANK = "not_bank"
    NOT_TRANSACTION = "not_transaction"
    SKIPPED_CREDIT = "skipped_credit"
    RECORDED = "recorded"


@dataclass(frozen=True)
class SmsIngestResult:
    """Result of ingesting one SMS."""

    status: IngestStatus
    parsed: Optional[ParsedSmsTransaction] = None
    transaction_id: Optional[int] = None
    category_id: Optional[int] = None

    @property
    def recorded(self) -> bool:
        return self.status == IngestStatus.RECORDED


class SmsIngestService:
    """Entry point for incoming bank SMS."""

    def __init__(
        self,
        db: Database,
        parser: Optional[SmsTransactionParser] = None,
        engine: Optional[CategorizationEngine] = None,
        notifier: Optional[Notifier] = None,
        cache: Optional[RecentMessageCache] = None,
        record_credits: bool = False,
    ):
        """Initialize the ingestion service.

        Args:
            db: Database instance
            parser: SMS parser, created if not given
            engine: Categorization engine, created from db if not given
            notifier: Receives a notification for every recorded transaction
            cache: Dedup cache for repeated deliveries
            record_credits: If False, credit messages are parsed but not stored
        """
        self.db = db
        self.parser = parser or SmsTransactionParser()
        self.engine = engine or CategorizationEngine(db)
        self.notifier = notifier or LoggingNotifier()
        self.cache = cache or RecentMessageCache()
        self.record_credits = record_credits

    def ingest(self, sender: str, body: str, received_at: Optional[datetime] = None) -> SmsIngestResult:
        """Process one incoming SMS.

        Args:
            sender: Sender ID, e.g. "VM-HDFCBK"
            body: Message text
            received_at: Delivery timestamp, part of the dedup key

        Returns:
            SmsIngestResult describing what happened
        """
        if received_at is None:
            received_at = datetime.now()

        key = RecentMessageCache.make_key(sender, received_at, body)
        if not self.cache.check_and_add(key):
            logger.debug("Dropping repeated delivery from %s", sender)
            return SmsIngestResult(IngestStatus.DUPLICATE)

        if not self.parser.is_bank_sms(sender):
            logger.debug("Ignoring SMS from non-bank sender %s", sender)
            return SmsIngestResult(IngestStatus.NOT_BANK)

        parsed = self.parser.parse(body, sender)
        if parsed is None:
            return SmsIngestResult(IngestStatus.NOT_TRANSACTION)

        if parsed.transaction_type == TransactionType.CREDIT and not self.record_credits:
            logger.info("Skipping credit of %s from %s", parsed.amount, parsed.bank_name)
            return SmsIngestResult(IngestStatus.SKIPPED_CREDIT, parsed=parsed)

        category_id = self.engine.categorize(parsed.merchant)
        transaction_id = self.db.create_transaction(
            amount=parsed.amount,
            merchant=parsed.merchant,
            timestamp=parsed.timestamp,
            bank_name=parsed.bank_name,
            transaction_type=parsed.transaction_type,
            category_id=category_id,
            raw_source_text=parsed.raw_text,
            account_last4=parsed.account_last4,
        )
        logger.info(
            "Recorded transaction %d: %s %s -> category %d",
            transaction_id,
            parsed.merchant,
            parsed.amount,
            category_id,
        )

        notification = build_notification(
            parsed.merchant,
            parsed.amount,
            category_id,
            self.db.get_category(category_id),
            self.engine.default_category_id,
        )
        self.notifier.notify(notification)

        return SmsIngestResult(
            IngestStatus.RECORDED,
            parsed=parsed,
            transaction_id=transaction_id,
            category_id=category_id,
        )
