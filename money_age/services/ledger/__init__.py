"""
Ledger Source Package

Provides the abstract interface for loading a budget snapshot and
a concrete implementation reading exported API responses from disk.
"""

from money_age.services.ledger.interface import (
    LedgerSourceInterface,
    select_budget,
)
from money_age.services.ledger.json_file import JsonFileLedgerSource

__all__ = [
    # Interface
    "LedgerSourceInterface",
    "select_budget",
    # JSON file implementation
    "JsonFileLedgerSource",
]
