"""
FIFO Allocator

Matches spending against income first-in-first-out: every unit spent
comes out of the oldest bucket that still has money in it.

The allocator owns the only mutable state in the computation, a cursor
of (current bucket index, amount already spent from that bucket).
The cursor only moves forward. There is no way to rewind it, which
is what makes a run's results reproducible from its sorted inputs.

    buckets:  [ A 50.00 ][ B 50.00 ][ C 80.00 ]
                            ^ index=1, spent_so_far=20.00

The age of a spend is measured to the bucket its LAST unit came from.
"""

import math
from datetime import date
from typing import Iterable, Optional, Sequence

import structlog

from money_age.errors import OverspentError
from money_age.models.aging import AgedSpend, AllocatorState, Bucket, SpendingEvent

logger = structlog.get_logger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def age_in_days(earned: date, spent: date) -> int:
    """Days between earning and spending, rounded from hours."""
    hours = (spent - earned).total_seconds() / 3600
    return round_half_away(hours / 24)


class FifoAllocator:
    """
    Consumes buckets in order as money is spent.

    Usage:
        allocator = FifoAllocator(buckets)
        bucket = allocator.consume(40_000)   # None if money ran out
    """

    def __init__(self, buckets: Sequence[Bucket]):
        self._buckets: list[Bucket] = list(buckets)
        self._index = 0
        self._spent_from_current = 0
        self._total = sum(bucket.amount for bucket in self._buckets)
        self._consumed = 0

    @property
    def buckets(self) -> tuple[Bucket, ...]:
        return tuple(self._buckets)

    @property
    def state(self) -> AllocatorState:
        """Snapshot of the cursor."""
        return AllocatorState(
            current_bucket_index=self._index,
            bucket_spent_so_far=self._spent_from_current,
        )

    @property
    def current_bucket(self) -> Optional[Bucket]:
        if self.exhausted:
            return None
        return self._buckets[self._index]

    @property
    def exhausted(self) -> bool:
        """True once every bucket has been fully spent."""
        return self._index >= len(self._buckets)

    @property
    def consumed(self) -> int:
        """Total milliunits consumed so far."""
        return self._consumed

    def remaining_capacity(self) -> int:
        """Milliunits not yet spent, across all buckets."""
        return self._total - self._consumed

    def add_bucket(self, bucket: Bucket) -> None:
        """
        Append a bucket (projected income).

        Buckets are only ever appended, so the cursor stays valid.
        """
        if self._buckets and bucket.date < self._buckets[-1].date:
            logger.warning(
                "bucket_out_of_order",
                date=bucket.date.isoformat(),
                last_date=self._buckets[-1].date.isoformat(),
            )
        self._buckets.append(bucket)
        self._total += bucket.amount

    def consume(self, amount: int) -> Optional[Bucket]:
        """
        Spend `amount` from the oldest money available.

        Returns:
            The bucket the last unit was drawn from, or None if the
            buckets ran out first. Whatever could be drawn stays drawn.

        Raises:
            ValueError: If amount isn't positive
        """
        if amount <= 0:
            raise ValueError(f"Can only consume a positive amount, got {amount}")

        remaining = amount
        last_bucket: Optional[Bucket] = None
        while remaining > 0:
            if self.exhausted:
                self._consumed += amount - remaining
                return None
            last_bucket = self._buckets[self._index]
            capacity = last_bucket.amount - self._spent_from_current
            if remaining < capacity:
                self._spent_from_current += remaining
                remaining = 0
            else:
                # exhaust this bucket
                remaining -= capacity
                self._index += 1
                self._spent_from_current = 0

        self._consumed += amount
        return last_bucket


def allocate_history(
    allocator: FifoAllocator,
    events: Iterable[SpendingEvent],
) -> list[AgedSpend]:
    """
    Age every historical spending event.

    `events` must already be in allocation order (see sort_spending).

    Raises:
        OverspentError: If spending exceeds all money ever earned.
            The allocator is left untouched by the failing event.
    """
    aged = []
    for event in events:
        available = allocator.remaining_capacity()
        if event.amount > available:
            raise OverspentError(event, event.amount - available)

        bucket = allocator.consume(event.amount)
        aged.append(AgedSpend(
            age_in_days=age_in_days(bucket.date, event.date),
            earned_date=bucket.date,
            spent_date=event.date,
            amount=event.amount,
            account_name=event.account_name,
            payee_name=event.payee_name,
        ))
    return aged
