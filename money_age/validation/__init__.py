"""Ledger validation package."""

from money_age.validation.validator import LedgerValidator

__all__ = ["LedgerValidator"]
