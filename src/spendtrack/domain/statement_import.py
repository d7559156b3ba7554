"""Bank statement import service."""

import logging
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

from spendtrack.database.base import Database
from spendtrack.domain.categorization import CategorizationEngine
from spendtrack.domain.duplicates import DuplicateDetector
from spendtrack.domain.entities import PdfTransaction
from spendtrack.domain.errors import PdfParsingError
from spendtrack.domain.statement_parser import StatementTableParser
from spendtrack.utils.pdf_text import extract_text

logger = logging.getLogger(__name__)

STATEMENT_BANK_NAME = "HDFC Bank"
IMPORT_SOURCE_TEXT = "Imported from PDF"


class StatementImportService:
    """Service for previewing and importing bank statements.

    Import is two-phase: parse_file/parse_text produce reviewable rows with
    suggested categories and duplicate flags, and import_selected stores
    the rows the user kept.
    """

    def __init__(
        self,
        db: Database,
        engine: Optional[CategorizationEngine] = None,
        detector: Optional[DuplicateDetector] = None,
    ):
        """Initialize statement import service.

        Args:
            db: Database instance
            engine: Categorization engine, created from db if not given
            detector: Duplicate detector, created from db if not given
        """
        self.db = db
        self.engine = engine or CategorizationEngine(db)
        self.detector = detector or DuplicateDetector(db)

    def read_statement(self, file_path: str, password: Optional[str] = None) -> str:
        """Return the plain text of a statement.

        Text files are read as already-extracted statement text; anything
        else is treated as a PDF.

        Raises:
            PdfPasswordRequiredError: Encrypted PDF and no password given
            PdfInvalidPasswordError: Wrong password
            PdfParsingError: File missing or unreadable
        """
        path = Path(file_path)
        if path.suffix.lower() != ".txt":
            return extract_text(file_path, password)

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PdfParsingError(f"Cannot read statement file: {e}") from e

    def parse_text(self, text: str, withdrawals_only: bool = False) -> list[PdfTransaction]:
        """Parse statement text into reviewable rows.

        Args:
            text: Extracted statement text
            withdrawals_only: Drop deposits from the result

        Returns:
            Rows with suggested_category_id and is_duplicate filled in
        """
        parser = StatementTableParser(withdrawals_only=withdrawals_only)
        transactions = parser.parse(text)

        suggestions = self.engine.categorize_many(txn.description for txn in transactions)
        transactions = [
            replace(txn, suggested_category_id=category_id)
            for txn, category_id in zip(transactions, suggestions)
        ]
        transactions = self.detector.mark_duplicates(transactions)

        logger.info(
            "Parsed %d statement rows (%d possible duplicates)",
            len(transactions),
            sum(1 for txn in transactions if txn.is_duplicate),
        )
        return transactions

    def parse_file(
        self,
        file_path: str,
        password: Optional[str] = None,
        withdrawals_only: bool = False,
    ) -> list[PdfTransaction]:
        """Read and parse a statement file. See read_statement and parse_text."""
        return self.parse_text(self.read_statement(file_path, password), withdrawals_only)

    def import_selected(
        self,
        transactions: Iterable[PdfTransaction],
        bank_name: str = STATEMENT_BANK_NAME,
        skip_duplicates: bool = False,
    ) -> list[int]:
        """Store the selected rows as new transactions.

        Args:
            transactions: Reviewed rows; only those with is_selected are stored
            bank_name: Bank display name for the new rows
            skip_duplicates: If True, rows flagged as duplicates are not stored

        Returns:
            IDs of the created transactions
        """
        created = []
        for txn in transactions:
            if not txn.is_selected:
                continue
            if skip_duplicates and txn.is_duplicate:
                logger.debug("Skipping duplicate row %s %s", txn.original_date_text, txn.description)
                continue

            category_id = (
                txn.suggested_category_id
                if txn.suggested_category_id is not None
                else self.engine.default_category_id
            )
            created.append(
                self.db.create_transaction(
                    amount=txn.amount,
                    merchant=txn.description,
                    timestamp=txn.timestamp,
                    bank_name=bank_name,
                    transaction_type=txn.transaction_type,
                    category_id=category_id,
                    raw_source_text=IMPORT_SOURCE_TEXT,
                    account_last4="",
                )
            )

        logger.info("Imported %d statement transactions", len(created))
        return created

    @staticmethod
    def selected(transactions: Iterable[PdfTransaction]) -> list[PdfTransaction]:
        """Rows currently selected for import."""
        return [txn for txn in transactions if txn.is_selected]

    @staticmethod
    def total_debit_amount(transactions: Iterable[PdfTransaction]) -> Decimal:
        """Sum of the debit amounts among the given rows."""
        return sum((txn.amount for txn in transactions if txn.is_debit), Decimal("0"))
