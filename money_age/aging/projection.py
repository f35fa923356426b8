"""
Projection Extension

Carries the allocator forward into scheduled transactions to show how
old money will be when upcoming bills are paid.

CRITICAL: A scheduled transfer only exists on ONE side until it posts,
so scheduled transactions are classified with `scheduled=True` (a
cash -> credit card payment has to be counted on the cash side).

Running out of buckets here is NOT an error. The spend is reported as
"not earned yet" and projection stops, because every later spend is
unfunded too.
"""

from typing import Iterable, Mapping, Optional

import structlog

from money_age.aging.allocator import FifoAllocator, age_in_days
from money_age.classification.policy import (
    BUDGET_AGING_POLICY,
    ClassifiedTransaction,
    MovementKind,
    classify,
)
from money_age.models.aging import Bucket, ProjectedSpend
from money_age.models.ledger import Account, ScheduledTransaction

logger = structlog.get_logger(__name__)


def sort_scheduled(
    scheduled: Iterable[ScheduledTransaction],
) -> list[ScheduledTransaction]:
    """Order scheduled transactions by next date, then larger amounts first."""
    return sorted(scheduled, key=lambda item: (item.date_next, -abs(item.amount)))


def scheduled_income_bucket(classified: ClassifiedTransaction) -> Optional[Bucket]:
    """
    Turn scheduled income into a future bucket, if it is income.

    Two shapes count:
    - a credit into an on-budget cash account that isn't a transfer
      (or is a transfer in from an off-budget account)
    - a transfer out of an off-budget account into an on-budget
      cash account, seen from the off-budget side
    """
    tx = classified.transaction
    if classified.kind is MovementKind.INCOME:
        return Bucket(
            date=tx.date,
            amount=classified.amount,
            account_name=tx.account_name or classified.account.name,
            payee_name=tx.payee_name,
            projected=True,
        )

    transfer = classified.transfer_account
    if (
        not classified.account.on_budget
        and transfer is not None
        and transfer.on_budget
        and transfer.cash_backed
        and tx.amount < 0
    ):
        return Bucket(
            date=tx.date,
            amount=-tx.amount,
            account_name=transfer.name,
            payee_name=tx.payee_name,
            projected=True,
        )
    return None


def project_scheduled(
    allocator: FifoAllocator,
    scheduled: Iterable[ScheduledTransaction],
    accounts: Mapping[str, Account],
    include_scheduled_income: bool = False,
) -> list[ProjectedSpend]:
    """
    Project the age of scheduled spending.

    Continues from the allocator's current cursor; it is never reset.

    Args:
        allocator: Allocator after historical spending was consumed
        scheduled: Scheduled transactions, in any order
        accounts: All accounts of the budget, keyed by id
        include_scheduled_income: Add scheduled income as future buckets

    Raises:
        UnknownAccountError: If a scheduled transaction references
            an unknown account
    """
    projected = []
    for item in sort_scheduled(scheduled):
        tx = item.as_projected_transaction()
        classified = classify(tx, accounts, BUDGET_AGING_POLICY, scheduled=True)
        account_name = tx.account_name or classified.account.name

        if classified.kind is not MovementKind.OUTFLOW:
            if not include_scheduled_income:
                continue
            bucket = scheduled_income_bucket(classified)
            if bucket is not None:
                allocator.add_bucket(bucket)
            continue

        bucket = allocator.consume(classified.magnitude)
        if bucket is None:
            logger.info(
                "scheduled_spend_not_earned_yet",
                spend_date=tx.date.isoformat(),
                amount=classified.magnitude,
                payee=tx.payee_name,
            )
            projected.append(ProjectedSpend(
                spend_date=tx.date,
                amount=classified.magnitude,
                account_name=account_name,
                payee_name=tx.payee_name,
            ))
            break

        projected.append(ProjectedSpend(
            age_in_days=age_in_days(bucket.date, tx.date),
            earned_date=bucket.date,
            spend_date=tx.date,
            amount=classified.magnitude,
            account_name=account_name,
            payee_name=tx.payee_name,
        ))
    return projected
