"""
Age of Money Engine

Runs the whole computation over an in-memory snapshot:

    classify -> buckets + spending -> FIFO history -> thresholds -> projection

No I/O happens here. The snapshot must already be loaded.
"""

from datetime import datetime
from typing import Optional

import structlog

from money_age.aging.allocator import FifoAllocator, allocate_history
from money_age.aging.buckets import buckets_from, classify_for_aging, spending_from
from money_age.aging.projection import project_scheduled
from money_age.aging.thresholds import (
    DEFAULT_MAX_AMOUNT,
    DEFAULT_MAX_BUCKETS,
    upcoming_thresholds,
)
from money_age.errors import NoIncomeError
from money_age.models.aging import AgeOfMoneyReport
from money_age.models.ledger import LedgerSnapshot

logger = structlog.get_logger(__name__)


def compute_age_of_money(
    snapshot: LedgerSnapshot,
    include_scheduled_income: bool = False,
    now: Optional[datetime] = None,
    threshold_max_buckets: int = DEFAULT_MAX_BUCKETS,
    threshold_max_amount: int = DEFAULT_MAX_AMOUNT,
) -> AgeOfMoneyReport:
    """
    Compute realized, upcoming and projected age of money.

    Raises:
        UnknownAccountError: If any account reference doesn't resolve
        NoIncomeError: If the ledger has no income at all
        OverspentError: If history spends more than was ever earned
    """
    accounts = snapshot.account_map
    classified = classify_for_aging(snapshot.transactions, accounts)

    buckets = buckets_from(classified)
    spending = spending_from(classified)

    total_earned = sum(bucket.amount for bucket in buckets)
    total_spent = sum(event.amount for event in spending)
    logger.debug("budget_difference", difference=total_earned - total_spent)

    if not buckets:
        raise NoIncomeError("Can't generate age of money without any money!")

    allocator = FifoAllocator(buckets)
    realized = allocate_history(allocator, spending)
    final_state = allocator.state

    thresholds = upcoming_thresholds(
        allocator,
        now=now,
        max_buckets=threshold_max_buckets,
        max_amount=threshold_max_amount,
    )

    projected = project_scheduled(
        allocator,
        snapshot.scheduled_transactions,
        accounts,
        include_scheduled_income=include_scheduled_income,
    )

    return AgeOfMoneyReport(
        realized=realized,
        thresholds=thresholds,
        projected=projected,
        final_state=final_state,
        bucket_count=len(buckets),
        total_earned=total_earned,
        total_spent=total_spent,
    )
