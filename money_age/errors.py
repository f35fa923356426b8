"""
Exceptions for Age of Money

DESIGN DECISION: There are two kinds of failure in an age-of-money run.

1. DATA INCONSISTENCY - the ledger snapshot is internally broken
   (an account reference does not resolve, or history spends more
   money than was ever earned). There is no safe partial result, so
   the whole computation aborts.
2. SOURCE / INPUT problems - the snapshot could not be loaded or the
   caller asked for something that doesn't exist.

Running out of money while PROJECTING scheduled spending is NOT an
error. It is reported as a "not earned yet" result.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from money_age.models.aging import SpendingEvent


class AgeOfMoneyError(Exception):
    """Base exception for age-of-money computations."""
    pass


class DataInconsistencyError(AgeOfMoneyError):
    """The ledger snapshot is internally inconsistent."""
    pass


class UnknownAccountError(DataInconsistencyError):
    """A transaction references an account that isn't in the snapshot."""

    def __init__(self, account_id: str, transaction_id: Optional[str] = None):
        self.account_id = account_id
        self.transaction_id = transaction_id
        message = f"could not find account id: {account_id}"
        if transaction_id:
            message += f" (referenced by transaction {transaction_id})"
        super().__init__(message)


class OverspentError(DataInconsistencyError):
    """Historical spending exceeds everything that was ever earned."""

    def __init__(self, event: "SpendingEvent", unfunded: int):
        self.event = event
        self.unfunded = unfunded
        super().__init__(
            f"spending on {event.date.isoformat()} at {event.payee_name!r} "
            f"exceeds all earned money by {unfunded} milliunits"
        )


class InvalidLedgerError(DataInconsistencyError):
    """Ledger validation found error-level issues."""

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message)


class NoIncomeError(AgeOfMoneyError):
    """The ledger has no income at all, so there is no money to age."""
    pass


class LedgerSourceError(AgeOfMoneyError):
    """Base exception for loading a ledger snapshot."""
    pass


class LedgerNotFoundError(LedgerSourceError):
    """A required ledger file doesn't exist."""
    pass


class LedgerFormatError(LedgerSourceError):
    """A ledger file isn't valid JSON or doesn't match the expected shape."""
    pass


class BudgetSelectionError(LedgerSourceError):
    """The budget to compute could not be determined."""
    pass


class PeriodError(AgeOfMoneyError):
    """An invalid month/year filter was supplied."""
    pass
