"""
Shared fixtures for Age of Money tests.

The account graph used throughout:

    chk     Checking        checking      on-budget   cash-backed
    sav     Savings         savings       on-budget   cash-backed
    visa    Visa            creditCard    on-budget
    loc     Line of Credit  lineOfCredit  on-budget
    brk     Brokerage       otherAsset    off-budget
    mtg     Mortgage        mortgage      off-budget
    rsv     Reserve         savings       off-budget  cash-backed
"""

from datetime import date
from itertools import count

import pytest

from money_age.models.ledger import (
    Account,
    AccountType,
    Budget,
    LedgerSnapshot,
    ScheduledTransaction,
    Transaction,
)


ACCOUNTS = [
    Account(id="chk", name="Checking", type=AccountType.CHECKING, on_budget=True),
    Account(id="sav", name="Savings", type=AccountType.SAVINGS, on_budget=True),
    Account(id="visa", name="Visa", type=AccountType.CREDIT_CARD, on_budget=True),
    Account(id="loc", name="Line of Credit", type=AccountType.LINE_OF_CREDIT, on_budget=True),
    Account(id="brk", name="Brokerage", type=AccountType.OTHER_ASSET, on_budget=False),
    Account(id="mtg", name="Mortgage", type=AccountType.MORTGAGE, on_budget=False),
    Account(id="rsv", name="Reserve", type=AccountType.SAVINGS, on_budget=False),
]

BUDGET = Budget(id="budget-1", name="My Budget")


@pytest.fixture
def accounts() -> dict[str, Account]:
    return {account.id: account for account in ACCOUNTS}


@pytest.fixture
def make_tx(accounts):
    """Factory for posted transactions."""
    ids = count(1)

    def _make(account_id, amount, day, payee="", transfer_to=None, memo="", deleted=False):
        return Transaction(
            id=f"tx-{next(ids)}",
            account_id=account_id,
            account_name=accounts[account_id].name if account_id in accounts else "",
            date=day if isinstance(day, date) else date.fromisoformat(day),
            amount=amount,
            payee_name=payee,
            memo=memo,
            transfer_account_id=transfer_to,
            deleted=deleted,
        )

    return _make


@pytest.fixture
def make_scheduled(accounts):
    """Factory for scheduled transactions."""
    ids = count(1)

    def _make(account_id, amount, day, payee="", transfer_to=None, deleted=False):
        day = day if isinstance(day, date) else date.fromisoformat(day)
        return ScheduledTransaction(
            id=f"sched-{next(ids)}",
            account_id=account_id,
            account_name=accounts[account_id].name if account_id in accounts else "",
            date_first=day,
            date_next=day,
            frequency="monthly",
            amount=amount,
            payee_name=payee,
            transfer_account_id=transfer_to,
            deleted=deleted,
        )

    return _make


@pytest.fixture
def make_snapshot():
    """Factory for snapshots over the shared account graph."""

    def _make(transactions=(), scheduled=()):
        return LedgerSnapshot(
            budget=BUDGET,
            accounts=ACCOUNTS,
            transactions=list(transactions),
            scheduled_transactions=list(scheduled),
        )

    return _make
