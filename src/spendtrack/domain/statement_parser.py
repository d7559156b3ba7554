"""Bank statement table parsing.

Works on the plain text extracted from an HDFC-style account statement.
Column positions in extracted text are unreliable, so each row is classified
as a withdrawal or a deposit by comparing its closing balance with the
previous row's closing balance.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from spendtrack.domain.entities import PdfTransaction
from spendtrack.utils.amount_parser import (
    STATEMENT_AMOUNT_RE,
    find_statement_amounts,
    first_statement_amount,
)
from spendtrack.utils.date_parser import STATEMENT_DATE_RE, parse_statement_date

logger = logging.getLogger(__name__)

HEADER_TOKENS = ("Date", "Narration", "Withdrawal Amt.", "Deposit Amt.")
SUMMARY_MARKER = "statement summary"
PAGE_MARKER = "Page No"
OPENING_BALANCE_MARKERS = ("opening balance", "opening bal", "op. balance")

ROW_START_RE = re.compile(r"^\d{2}[/-]\d{2}[/-]\d{2,4}")
REFERENCE_RE = re.compile(r"\b0000\d{11,12}\b")

# A wrapped row never spans more than this many extracted lines.
MAX_ROW_LINES = 10


@dataclass(frozen=True)
class StatementRow:
    """One logical table row before debit/credit classification."""

    date_text: str
    description: str
    amounts: tuple[Decimal, ...]
    balance: Decimal


def _is_row_start(line: str) -> bool:
    return ROW_START_RE.match(line.strip()) is not None


def _is_summary(line: str) -> bool:
    return SUMMARY_MARKER in line.lower()


def _clean_description(text: str) -> str:
    text = STATEMENT_DATE_RE.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


class StatementTableParser:
    """Recovers transactions from statement text."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        withdrawals_only: bool = False,
    ):
        """Initialize the parser.

        Args:
            clock: Timestamp source for rows whose date cannot be parsed
            withdrawals_only: Drop deposits from the result
        """
        self.clock = clock
        self.withdrawals_only = withdrawals_only

    def parse(self, text: str) -> list[PdfTransaction]:
        """Parse statement text into transactions, in statement order.

        Args:
            text: Full plain-text extraction of the statement

        Returns:
            Transactions with a definite debit or credit. A statement without
            a recognizable table yields an empty list.
        """
        lines = text.splitlines()
        bounds = self.find_table(lines)
        if bounds is None:
            logger.warning("Could not find transaction table")
            return []
        start, end = bounds

        previous_balance = self.find_opening_balance(lines, end)
        if previous_balance is None:
            logger.warning("Opening balance not found; first row will be skipped")
        else:
            logger.debug("Starting with opening balance %s", previous_balance)

        transactions = []
        for index in range(start, end):
            if not _is_row_start(lines[index]):
                continue

            row = self.split_row(self.collect_row_text(lines, index, end))
            if row is None:
                logger.debug("No amounts found in row at line %d", index)
                continue

            debit, credit = self.classify(row, previous_balance)
            previous_balance = row.balance

            if debit is None and credit is None:
                continue
            if self.withdrawals_only and debit is None:
                logger.debug("Skipped deposit: %s %s", row.date_text, credit)
                continue

            transactions.append(
                PdfTransaction(
                    original_date_text=row.date_text,
                    timestamp=self.parse_row_date(row.date_text),
                    description=row.description,
                    debit_amount=debit,
                    credit_amount=credit,
                    running_balance=row.balance,
                )
            )

        logger.debug("Parsed %d transactions", len(transactions))
        return transactions

    def find_table(self, lines: list[str]) -> Optional[tuple[int, int]]:
        """Locate the table as a [start, end) line range.

        Returns:
            Line range, or None if no header line is present
        """
        start = None
        for index, line in enumerate(lines):
            if all(token in line for token in HEADER_TOKENS):
                start = index + 1
                break
        if start is None:
            return None

        for index in range(start, len(lines)):
            if _is_summary(lines[index]):
                return start, index
        return start, len(lines)

    def find_opening_balance(self, lines: list[str], table_end: int) -> Optional[Decimal]:
        """Find the opening balance, preferring the statement summary section."""
        balance = self._search_opening_balance(lines, table_end, len(lines))
        if balance is None:
            logger.debug("Opening balance not in summary, searching entire document")
            balance = self._search_opening_balance(lines, 0, len(lines))
        return balance

    def _search_opening_balance(
        self, lines: list[str], start: int, end: int
    ) -> Optional[Decimal]:
        for index in range(start, end):
            lowered = lines[index].lower()
            if not any(marker in lowered for marker in OPENING_BALANCE_MARKERS):
                continue
            amount = first_statement_amount(lines[index])
            if amount is None and index + 1 < len(lines):
                # Summary tables often print the figure under the label
                amount = first_statement_amount(lines[index + 1])
            if amount is not None:
                return amount
        return None

    def collect_row_text(self, lines: list[str], index: int, end: int) -> str:
        """Join a row's wrapped lines into one whitespace-normalized string."""
        parts = [lines[index]]
        for cursor in range(index + 1, min(end, index + MAX_ROW_LINES)):
            line = lines[cursor]
            if _is_row_start(line) or _is_summary(line) or PAGE_MARKER in line:
                break
            parts.append(line)
        return re.sub(r"\s+", " ", " ".join(parts)).strip()

    def split_row(self, row_text: str) -> Optional[StatementRow]:
        """Split row text into description, transaction amounts and balance.

        The reference number separates narration from the amount columns.
        Without one, the narration ends at the first amount.

        Returns:
            Row, or None if the row carries no amounts
        """
        date_match = ROW_START_RE.match(row_text)
        if date_match is None:
            return None

        reference = REFERENCE_RE.search(row_text)
        if reference is not None:
            head = row_text[: reference.start()]
            amounts_region = row_text[reference.end():].strip()
        else:
            first_amount = STATEMENT_AMOUNT_RE.search(row_text)
            if first_amount is None:
                return None
            head = row_text[: first_amount.start()]
            amounts_region = row_text[first_amount.start():]

        # Value date column
        amounts_region = re.sub(r"^\d{2}[/-]\d{2}[/-]\d{2,4}", "", amounts_region).strip()

        amounts = find_statement_amounts(amounts_region)
        if not amounts:
            return None

        return StatementRow(
            date_text=date_match.group(0),
            description=_clean_description(head),
            amounts=tuple(amounts[:-1]),
            balance=amounts[-1],
        )

    def classify(
        self, row: StatementRow, previous_balance: Optional[Decimal]
    ) -> tuple[Optional[Decimal], Optional[Decimal]]:
        """Return (debit, credit) for a row from the balance movement.

        Rows with several transaction amounts use the first one. A row with
        no previous balance to compare against is left unclassified.
        """
        if not row.amounts:
            logger.debug("Balance-only row: %s", row.date_text)
            return None, None

        if len(row.amounts) > 1:
            logger.warning(
                "Found %d transaction amounts on %s, using the first",
                len(row.amounts),
                row.date_text,
            )
        amount = row.amounts[0]

        if previous_balance is None:
            logger.warning(
                "Skipped first transaction %s (no opening balance); using balance %s as reference",
                amount,
                row.balance,
            )
            return None, None

        if row.balance > previous_balance:
            return None, amount
        # A decrease is a withdrawal; an unchanged balance is treated as one too
        return amount, None

    def parse_row_date(self, date_text: str) -> datetime:
        """Parse a row date, falling back to the current time."""
        parsed = parse_statement_date(date_text)
        if parsed is None:
            logger.warning("Could not parse date: %s", date_text)
            return self.clock()
        return parsed
