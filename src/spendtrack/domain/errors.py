"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StatementError(DomainError):
    """Document-level failure while reading a bank statement."""


class PdfPasswordRequiredError(StatementError):
    """The statement PDF is encrypted and no password was supplied."""

    def __init__(self, message: str = "Password required"):
        super().__init__(message)


class PdfInvalidPasswordError(StatementError):
    """The supplied statement password is wrong."""

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class PdfParsingError(StatementError):
    """The statement could not be opened or its text could not be extracted."""


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def default_category_delete_blocked(name: str) -> str:
    """Return message when a default category is targeted for deletion."""
    return f"Cannot delete default category '{name}'"
