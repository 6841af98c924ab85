"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date, resolve_month_day, parse_statement_period
from ledgerkit.utils.amount_parser import parse_amount, split_amount, find_amounts

__all__ = [
    "parse_date",
    "resolve_month_day",
    "parse_statement_period",
    "parse_amount",
    "split_amount",
    "find_amounts",
]
