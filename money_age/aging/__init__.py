"""FIFO age-of-money computation package."""

from money_age.aging.allocator import (
    FifoAllocator,
    age_in_days,
    allocate_history,
    round_half_away,
)
from money_age.aging.buckets import (
    build_buckets,
    build_spending_events,
    sort_spending,
)
from money_age.aging.engine import compute_age_of_money
from money_age.aging.projection import (
    project_scheduled,
    scheduled_income_bucket,
    sort_scheduled,
)
from money_age.aging.thresholds import days_since, upcoming_thresholds

__all__ = [
    "FifoAllocator",
    "age_in_days",
    "allocate_history",
    "build_buckets",
    "build_spending_events",
    "compute_age_of_money",
    "days_since",
    "project_scheduled",
    "round_half_away",
    "scheduled_income_bucket",
    "sort_scheduled",
    "sort_spending",
    "upcoming_thresholds",
]
