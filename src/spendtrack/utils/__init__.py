"""Utility functions for spendtrack."""

from spendtrack.utils.date_parser import parse_date, parse_statement_date
from spendtrack.utils.amount_parser import parse_amount, find_statement_amounts

__all__ = ["parse_date", "parse_statement_date", "parse_amount", "find_statement_amounts"]
