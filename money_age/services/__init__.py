"""Services package."""

from money_age.services.ledger import (
    JsonFileLedgerSource,
    LedgerSourceInterface,
    select_budget,
)

__all__ = [
    # Ledger sources
    "JsonFileLedgerSource",
    "LedgerSourceInterface",
    "select_budget",
]
