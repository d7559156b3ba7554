"""PDF opening, decryption and text extraction.

Only this module touches PDF structure; the statement parser consumes the
plain text it returns.
"""

import logging
from pathlib import Path
from typing import Optional

from pypdf import PdfReader
from pypdf import PasswordType
from pypdf.errors import PdfReadError

from spendtrack.domain.errors import (
    PdfInvalidPasswordError,
    PdfParsingError,
    PdfPasswordRequiredError,
)

logger = logging.getLogger(__name__)


def open_pdf(pdf_path: str) -> PdfReader:
    """Open a PDF file without decrypting it.

    Raises:
        PdfParsingError: If the file cannot be read as a PDF
    """
    path = Path(pdf_path)
    if not path.exists():
        raise PdfParsingError(f"Cannot open PDF file: {pdf_path} not found")
    try:
        return PdfReader(str(path))
    except Exception as e:
        raise PdfParsingError(f"Cannot open PDF file: {e}") from e


def unlock(reader: PdfReader, password: Optional[str]) -> None:
    """Decrypt an encrypted reader in place.

    An empty user password is tried first when no password is given, since
    many "protected" statements only carry an owner password.

    Raises:
        PdfPasswordRequiredError: If a password is needed and none was given
        PdfInvalidPasswordError: If the given password is wrong
    """
    if not reader.is_encrypted:
        return

    logger.debug("PDF is encrypted")
    try:
        if password is None:
            if reader.decrypt("") == PasswordType.NOT_DECRYPTED:
                raise PdfPasswordRequiredError()
            return
        if reader.decrypt(password) == PasswordType.NOT_DECRYPTED:
            raise PdfInvalidPasswordError()
    except (NotImplementedError, PdfReadError) as e:
        # Unsupported encryption algorithm or missing crypto provider
        raise PdfInvalidPasswordError(f"Failed to decrypt PDF: {e}") from e
    logger.debug("PDF successfully decrypted")


def extract_text(pdf_path: str, password: Optional[str] = None) -> str:
    """Extract the plain text of every page, pages joined by newlines.

    Args:
        pdf_path: Path to the PDF file
        password: Optional password for encrypted statements

    Returns:
        Extracted text

    Raises:
        PdfPasswordRequiredError: Encrypted and no password supplied
        PdfInvalidPasswordError: Wrong password supplied
        PdfParsingError: Any other failure reading the document
    """
    reader = open_pdf(pdf_path)
    unlock(reader, password)

    try:
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise PdfParsingError(f"Failed to parse PDF: {e}") from e

    text = "\n".join(pages)
    logger.debug("Extracted text length: %d", len(text))
    return text
