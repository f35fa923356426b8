"""
Bucket Builder

Splits a ledger into the two streams the FIFO allocator matches up:

    buckets         - income, oldest first
    spending events - outflows, oldest first

Both come from Policy A classification, so "what counts as income"
and "what counts as spending" can never disagree with each other.

DESIGN DECISION: Buckets are sorted by date explicitly. The API
happens to return transactions in date order, but the allocator's
correctness depends on it, so we don't rely on that.
"""

from typing import Iterable, Mapping

import structlog

from money_age.classification.policy import (
    BUDGET_AGING_POLICY,
    ClassifiedTransaction,
    MovementKind,
    classify,
)
from money_age.models.aging import Bucket, SpendingEvent
from money_age.models.ledger import Account, Transaction

logger = structlog.get_logger(__name__)


def classify_for_aging(
    transactions: Iterable[Transaction],
    accounts: Mapping[str, Account],
) -> list[ClassifiedTransaction]:
    """Classify every transaction under the budget aging policy."""
    return [classify(tx, accounts, BUDGET_AGING_POLICY) for tx in transactions]


def _account_name(classified: ClassifiedTransaction) -> str:
    return classified.transaction.account_name or classified.account.name


def buckets_from(classified: Iterable[ClassifiedTransaction]) -> list[Bucket]:
    """Income entries as buckets, sorted by date (stable)."""
    buckets = [
        Bucket(
            date=c.transaction.date,
            amount=c.amount,
            account_name=_account_name(c),
            payee_name=c.transaction.payee_name,
        )
        for c in classified
        if c.kind is MovementKind.INCOME
    ]
    buckets.sort(key=lambda bucket: bucket.date)

    cumulative = 0
    for bucket in buckets:
        cumulative += bucket.amount
        logger.debug(
            "income",
            date=bucket.date.isoformat(),
            cumulative_earned=cumulative,
            amount=bucket.amount,
            account=bucket.account_name,
            payee=bucket.payee_name,
        )
    return buckets


def spending_from(classified: Iterable[ClassifiedTransaction]) -> list[SpendingEvent]:
    """Outflow entries as positive spending events, in allocation order."""
    events = [
        SpendingEvent(
            date=c.transaction.date,
            amount=c.magnitude,
            account_name=_account_name(c),
            payee_name=c.transaction.payee_name,
        )
        for c in classified
        if c.kind is MovementKind.OUTFLOW
    ]
    return sort_spending(events)


def sort_spending(events: Iterable[SpendingEvent]) -> list[SpendingEvent]:
    """
    Order spending for allocation: by date, then larger amounts first.

    On a tied date the big outflows take the oldest money.
    """
    return sorted(events, key=lambda event: (event.date, -event.amount))


def build_buckets(
    transactions: Iterable[Transaction],
    accounts: Mapping[str, Account],
) -> list[Bucket]:
    """
    Build income buckets from posted transactions.

    A transaction is income when its account is on-budget and
    cash-backed, the amount is positive, and it isn't a transfer
    (or it's a transfer in from an off-budget account).
    """
    return buckets_from(classify_for_aging(transactions, accounts))


def build_spending_events(
    transactions: Iterable[Transaction],
    accounts: Mapping[str, Account],
) -> list[SpendingEvent]:
    """Build sorted spending events from posted transactions."""
    return spending_from(classify_for_aging(transactions, accounts))
