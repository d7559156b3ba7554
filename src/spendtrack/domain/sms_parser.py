"""Bank SMS transaction parsing.

Extraction is regex driven and best effort. Messages that do not describe a
transaction yield None rather than an error.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from spendtrack.domain.entities import ParsedSmsTransaction, TransactionType
from spendtrack.utils.amount_parser import amounts_equal, try_parse_amount

logger = logging.getLogger(__name__)

UNKNOWN_MERCHANT = "Unknown Merchant"
DEFAULT_BANK_NAME = "Bank"

# Sender codes, matched as substrings of the normalized sender ID.
BANK_SENDERS = [
    "HDFCBK", "HDFC",
    "ICICIB", "ICICI",
    "SBIINB", "SBI", "CBSSBI",
    "AXISBK", "AXIS",
    "KOTAKBNK", "KOTAK",
    "PNBSMS", "PNB",
    "BOIIND", "BOI",
    "CANBNK", "CANARA",
    "UNIONBK",
    "TMBSMS", "TMB",
    "IDFCFB", "IDFC",
    "YESBNK", "YES",
    "INDBNK", "INDIAN",
    "SCBANK", "SC",
    "CITIBK", "CITI",
    "HSBCIN", "HSBC",
    "DEUTIN", "DEUTSCHE",
]

# First matching fragment wins.
BANK_NAMES = [
    ("HDFC", "HDFC Bank"),
    ("ICICI", "ICICI Bank"),
    ("SBI", "State Bank of India"),
    ("AXIS", "Axis Bank"),
    ("KOTAK", "Kotak Bank"),
    ("PNB", "Punjab National Bank"),
    ("BOI", "Bank of India"),
    ("CANARA", "Canara Bank"),
    ("UNION", "Union Bank"),
    ("TMB", "Tamilnad Mercantile Bank"),
    ("IDFC", "IDFC First Bank"),
    ("YES", "Yes Bank"),
    ("INDIAN", "Indian Bank"),
    ("SC", "Standard Chartered"),
    ("CITI", "Citibank"),
    ("HSBC", "HSBC"),
    ("DEUTSCHE", "Deutsche Bank"),
]

DEBIT_KEYWORDS = ["debited", "withdrawn", "spent", "paid", "purchase", "debit", "used", "sent"]

CREDIT_KEYWORDS = ["credited", "deposited", "received", "credit", "refund"]

# Phrases of statements, bills, balance alerts, rewards, EMIs and promotions.
EXCLUDE_KEYWORDS = [
    "statement", "total amount due", "min amount due", "minimum due",
    "payment due", "bill generated", "outstanding", "due date",
    "available balance", "avl bal", "current balance", "balance is",
    "reward points", "cashpoints", "credit limit", "limit available",
    "auto debit", "emi deducted", "emi due", "standing instruction",
    "voucher", "congrats", "congratulations", "offer", "cashback offer",
    "claim now", "redeem", "promo code", "discount code", "coupon",
    "t&c apply", "terms and conditions",
]

_NUMBER = r"([\d,]+(?:\.\d{2})?)"

AMOUNT_PATTERNS = [
    re.compile(r"(?:Rs\.?|INR|₹)\s*" + _NUMBER, re.IGNORECASE),
    re.compile(r"(?:amount|amt)\s*(?:of)?\s*(?:Rs\.?|INR|₹)?\s*" + _NUMBER, re.IGNORECASE),
]

BALANCE_PATTERN = re.compile(
    r"(?:avl|available|current)\s*(?:bal|balance)\s*(?:is)?\s*(?:Rs\.?|INR|₹)?\s*" + _NUMBER,
    re.IGNORECASE,
)

MERCHANT_PATTERNS = [
    re.compile(
        r"\b(?:at|to|for|on)\s+([A-Z][A-Z0-9\s&-]+?)(?:\s+on|\.|,|\s+avl|\s+info)",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:merchant|vendor)\s+([A-Z][A-Z0-9\s&-]+?)(?:\.|,|\s)", re.IGNORECASE),
    # UPI "To NAME" alerts
    re.compile(r"\bTo\s+([A-Z][A-Z\s]+?)(?:\s+On|\n|$)", re.IGNORECASE),
]

MERCHANT_FALLBACK_PATTERN = re.compile(r"\b(?:at|to|for)\s+([A-Z]+[A-Z0-9]*)", re.IGNORECASE)

ACCOUNT_PATTERN = re.compile(
    r"(?:A/c|account|card)\s*(?:no\.?)?\s*(?:XX|\*\*|ending)?\s*(\d{4})", re.IGNORECASE
)


def _contains_any(text: str, keywords: list[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def clean_merchant(raw: str) -> str:
    """Collapse whitespace and drop characters other than letters, digits, space, & and -."""
    merchant = re.sub(r"\s+", " ", raw)
    merchant = re.sub(r"[^A-Za-z0-9\s&-]", "", merchant)
    return merchant.strip()


class SmsTransactionParser:
    """Parses bank notification SMS bodies into transactions."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """Initialize the parser.

        Args:
            clock: Source of the parse-time timestamp
        """
        self.clock = clock

    def is_bank_sms(self, sender: str) -> bool:
        """Check whether a sender ID belongs to a known bank."""
        normalized = sender.upper().replace("-", "").replace("_", "")
        return any(code in normalized for code in BANK_SENDERS)

    def parse(self, body: str, sender: str) -> Optional[ParsedSmsTransaction]:
        """Parse an SMS body.

        Args:
            body: Message text
            sender: Sender ID, used to resolve the bank name

        Returns:
            Parsed transaction, or None if the message is not a transaction
        """
        logger.debug("Parsing SMS from %s: %s", sender, body)
        lower_body = body.lower()

        has_debit = _contains_any(lower_body, DEBIT_KEYWORDS)
        has_credit = _contains_any(lower_body, CREDIT_KEYWORDS)

        # Exclusions only apply without a transaction keyword, so a debit
        # alert that also quotes the balance is still accepted.
        if not (has_debit or has_credit) and _contains_any(lower_body, EXCLUDE_KEYWORDS):
            logger.debug("Skipping non-transaction SMS (statement/bill/alert/promo)")
            return None

        amount = self.extract_amount(body)
        if amount is None:
            logger.debug("Could not extract amount from SMS")
            return None

        if has_debit and not has_credit:
            transaction_type = TransactionType.DEBIT
        elif has_credit and not has_debit:
            transaction_type = TransactionType.CREDIT
        else:
            transaction_type = TransactionType.UNKNOWN

        parsed = ParsedSmsTransaction(
            amount=amount,
            merchant=self.extract_merchant(body) or UNKNOWN_MERCHANT,
            transaction_type=transaction_type,
            timestamp=self.clock(),
            account_last4=self.extract_account_last4(body),
            bank_name=self.resolve_bank_name(sender),
            raw_text=body,
        )
        logger.debug("Parsed SMS transaction: %s", parsed)
        return parsed

    def extract_amount(self, body: str) -> Optional[Decimal]:
        """Return the first currency amount that is not the quoted balance."""
        balance = None
        balance_match = BALANCE_PATTERN.search(body)
        if balance_match:
            balance = try_parse_amount(balance_match.group(1))

        for pattern in AMOUNT_PATTERNS:
            for match in pattern.finditer(body):
                amount = try_parse_amount(match.group(1))
                if amount is None:
                    continue
                if balance is not None and amounts_equal(amount, balance):
                    continue
                return amount
        return None

    def extract_merchant(self, body: str) -> Optional[str]:
        """Return a cleaned merchant name, or None."""
        for pattern in MERCHANT_PATTERNS:
            match = pattern.search(body)
            if match:
                merchant = clean_merchant(match.group(1))
                if merchant:
                    return merchant

        match = MERCHANT_FALLBACK_PATTERN.search(body)
        if match:
            return match.group(1).strip()
        return None

    def extract_account_last4(self, body: str) -> Optional[str]:
        """Return the last four digits of the account or card, if quoted."""
        match = ACCOUNT_PATTERN.search(body)
        return match.group(1) if match else None

    def resolve_bank_name(self, sender: str) -> str:
        """Map a sender ID to a display name."""
        normalized = sender.upper()
        for fragment, name in BANK_NAMES:
            if fragment in normalized:
                return name
        return DEFAULT_BANK_NAME
