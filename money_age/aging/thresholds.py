"""
Threshold Reporter

After history is allocated, the buckets still holding money tell you
what spending today would cost in age: the next X dollars come out of
money earned on date D, so they'd be N days old.
"""

from datetime import date, datetime, time, timezone
from typing import Optional

from money_age.aging.allocator import FifoAllocator, round_half_away
from money_age.models.aging import SpendingThreshold

DEFAULT_MAX_BUCKETS = 25
DEFAULT_MAX_AMOUNT = 20_000_000


def days_since(day: date, now: datetime) -> int:
    """Whole days from midnight UTC on `day` until `now`, rounded from hours."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    hours = (now - start).total_seconds() / 3600
    return round_half_away(hours / 24)


def upcoming_thresholds(
    allocator: FifoAllocator,
    now: Optional[datetime] = None,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
    max_amount: int = DEFAULT_MAX_AMOUNT,
) -> list[SpendingThreshold]:
    """
    List upcoming spending thresholds from the allocator's cursor.

    Walks the remaining buckets, accumulating their unspent money
    (the current bucket net of what's already been spent from it).
    Stops after `max_buckets` entries, or once the cumulative total
    has passed `max_amount`; the entry that crosses it is included.

    Args:
        allocator: Allocator after historical spending was consumed
        now: Timezone-aware "today" (defaults to the current UTC time)
        max_buckets: Maximum number of entries
        max_amount: Cumulative milliunits after which to stop
    """
    now = now or datetime.now(timezone.utc)
    state = allocator.state
    remaining = allocator.buckets[state.current_bucket_index:]

    thresholds = []
    cumulative = 0
    for offset, bucket in enumerate(remaining):
        if offset >= max_buckets or cumulative > max_amount:
            break
        if offset == 0:
            cumulative += bucket.amount - state.bucket_spent_so_far
        else:
            cumulative += bucket.amount
        thresholds.append(SpendingThreshold(
            age_if_spent_today=days_since(bucket.date, now) - 1,
            bucket_date=bucket.date,
            cumulative_amount=cumulative,
            account_name=bucket.account_name,
            payee_name=bucket.payee_name,
        ))
    return thresholds
