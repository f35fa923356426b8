"""
Ledger Models for Age of Money

These models mirror the records returned by the YNAB API
(accounts, transactions, scheduled transactions, budgets).

DESIGN DECISION: Amounts stay as signed integer MILLIUNITS
(1/1000 of a currency unit), exactly as the API sends them.
Converting to floats or Decimals would invite rounding drift
in a computation that sums thousands of entries.

Ledger records are frozen. The classifier never mutates a
transaction; sign normalization happens on the classified result.
"""

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class AccountType(str, Enum):
    """
    Account types known to the budgeting API.

    Only CASH, CHECKING and SAVINGS hold real money ("cash-backed").
    Everything else is credit, debt or a tracking asset.

    The API has used other names over time (payPal, merchantAccount,
    investmentAccount, ...). Accounts keep those as plain strings
    and are never cash-backed.
    """
    CASH = "cash"
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "creditCard"
    LINE_OF_CREDIT = "lineOfCredit"
    OTHER_ASSET = "otherAsset"
    OTHER_LIABILITY = "otherLiability"
    MORTGAGE = "mortgage"
    AUTO_LOAN = "autoLoan"
    STUDENT_LOAN = "studentLoan"
    PERSONAL_LOAN = "personalLoan"
    MEDICAL_DEBT = "medicalDebt"
    OTHER_DEBT = "otherDebt"


CASH_BACKED_TYPES = frozenset({
    AccountType.CASH,
    AccountType.CHECKING,
    AccountType.SAVINGS,
})


class FlagColor(str, Enum):
    """Transaction flag colors. An unflagged transaction has no color."""
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class _LedgerRecord(BaseModel):
    """Common config for records parsed from the API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator('memo', 'payee_name', 'category_name', mode='before', check_fields=False)
    @classmethod
    def none_to_empty(cls, v):
        """The API sends null for empty memos and payees."""
        return "" if v is None else v


class Budget(_LedgerRecord):
    """A budget the ledger belongs to."""

    id: str
    name: str


class Category(_LedgerRecord):
    """A budget category."""

    id: str
    name: str
    category_group_id: str = ""
    hidden: bool = False
    deleted: bool = False


class CategoryGroup(_LedgerRecord):
    """
    A group of categories.

    Hidden groups hold categories the user retired; exports don't
    report their group name.
    """

    id: str
    name: str
    hidden: bool = False
    deleted: bool = False
    categories: list[Category] = Field(default_factory=list)


class Account(_LedgerRecord):
    """
    An account in the budget.

    `on_budget` accounts take part in budgeting; off-budget
    accounts are tracking-only (investments, mortgages, ...).
    """

    id: str
    name: str
    type: Union[AccountType, str] = Field(
        ...,
        union_mode="left_to_right",
        description="An AccountType, or the raw name of a type we don't know"
    )
    on_budget: bool = Field(
        ...,
        description="Is this account included in the budget?"
    )
    closed: bool = False
    note: Optional[str] = None
    balance: int = Field(
        default=0,
        description="Current balance in milliunits"
    )
    deleted: bool = False
    transfer_payee_id: Optional[str] = None

    @property
    def cash_backed(self) -> bool:
        """True for accounts holding real cash (cash/checking/savings)."""
        return self.type in CASH_BACKED_TYPES


class Transaction(_LedgerRecord):
    """A posted transaction."""

    id: str
    account_id: str
    account_name: str = ""
    date: date
    amount: int = Field(
        ...,
        description="Signed amount in milliunits (negative = money out)"
    )
    payee_name: str = ""
    memo: str = ""
    transfer_account_id: Optional[str] = Field(
        default=None,
        description="The other account of a transfer, if any"
    )
    category_id: Optional[str] = None
    category_name: str = ""
    cleared: str = Field(
        default="",
        description="cleared, uncleared or reconciled"
    )
    flag_color: Optional[FlagColor] = None
    deleted: bool = False

    @field_validator('flag_color', mode='before')
    @classmethod
    def empty_flag_is_none(cls, v):
        """Unflagged transactions arrive as null or ""."""
        return None if v == "" else v

    @property
    def is_transfer(self) -> bool:
        return self.transfer_account_id is not None


class ScheduledTransaction(_LedgerRecord):
    """
    A predicted future transaction that hasn't posted yet.

    CRITICAL: A scheduled transfer is only seen from ONE side.
    There's no mirror record in the other account until it posts,
    so the classifier has to compensate (see `scheduled=True`).
    """

    id: str
    account_id: str
    account_name: str = ""
    date_first: date
    date_next: date
    frequency: str = "never"
    amount: int
    payee_name: str = ""
    memo: str = ""
    transfer_account_id: Optional[str] = None
    deleted: bool = False

    def as_projected_transaction(self) -> Transaction:
        """Build the transaction this schedule will post on `date_next`."""
        return Transaction(
            id=self.id,
            account_id=self.account_id,
            account_name=self.account_name,
            date=self.date_next,
            amount=self.amount,
            payee_name=self.payee_name,
            memo=self.memo,
            transfer_account_id=self.transfer_account_id,
        )


class LedgerSnapshot(BaseModel):
    """
    Everything the computation needs, fetched up front.

    The core never performs I/O; it only reads this snapshot.
    """

    model_config = ConfigDict(frozen=True)

    budget: Optional[Budget] = None
    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    scheduled_transactions: list[ScheduledTransaction] = Field(default_factory=list)
    category_groups: list[CategoryGroup] = Field(default_factory=list)

    @property
    def account_map(self) -> dict[str, Account]:
        """Accounts keyed by id."""
        return {account.id: account for account in self.accounts}

    def without_deleted(self) -> "LedgerSnapshot":
        """
        Copy of the snapshot with deleted transactions removed.

        Deleted accounts are kept so old references still resolve.
        """
        return LedgerSnapshot(
            budget=self.budget,
            accounts=self.accounts,
            transactions=[t for t in self.transactions if not t.deleted],
            scheduled_transactions=[
                s for s in self.scheduled_transactions if not s.deleted
            ],
            category_groups=self.category_groups,
        )
