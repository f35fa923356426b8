"""
Aging Models for Age of Money

These models carry money through the FIFO computation:

    Bucket         - money that became available to spend
    SpendingEvent  - money that was spent
    AllocatorState - how far through the buckets spending has reached

and the three result sequences:

    AgedSpend          - realized spending and its age
    SpendingThreshold  - how much could be spent today, and at what age
    ProjectedSpend     - scheduled spending and its projected age

DESIGN DECISION: Buckets and events are immutable. Partial consumption
of a bucket is tracked by the allocator's cursor, never by shrinking
the bucket, so a bucket's amount is fixed from the moment it exists.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# FIFO INPUTS
# =============================================================================

class Bucket(BaseModel):
    """A dated, positive amount of earned money."""

    model_config = ConfigDict(frozen=True)

    date: date
    amount: int = Field(
        ...,
        gt=0,
        description="Earned amount in milliunits"
    )
    account_name: str = ""
    payee_name: str = ""
    projected: bool = Field(
        default=False,
        description="Built from scheduled income rather than a posted transaction"
    )


class SpendingEvent(BaseModel):
    """A dated, positive (sign-normalized) amount of spending."""

    model_config = ConfigDict(frozen=True)

    date: date
    amount: int = Field(
        ...,
        gt=0,
        description="Spent amount in milliunits, always positive"
    )
    account_name: str = ""
    payee_name: str = ""


class AllocatorState(BaseModel):
    """
    Snapshot of the FIFO cursor.

    The cursor only ever moves forward: the index never decreases,
    and `bucket_spent_so_far` only resets when the index advances.
    """

    model_config = ConfigDict(frozen=True)

    current_bucket_index: int = Field(default=0, ge=0)
    bucket_spent_so_far: int = Field(default=0, ge=0)


# =============================================================================
# RESULTS
# =============================================================================

class AgedSpend(BaseModel):
    """One realized spend and the age of the money that paid for it."""

    model_config = ConfigDict(frozen=True)

    age_in_days: int
    earned_date: date
    spent_date: date
    amount: int = Field(..., gt=0)
    account_name: str = ""
    payee_name: str = ""


class SpendingThreshold(BaseModel):
    """
    An upcoming spending threshold.

    Spending up to `cumulative_amount` today draws on money
    earned on `bucket_date`, giving it `age_if_spent_today`.
    """

    model_config = ConfigDict(frozen=True)

    age_if_spent_today: int
    bucket_date: date
    cumulative_amount: int
    account_name: str = ""
    payee_name: str = ""


class ProjectedSpend(BaseModel):
    """
    A scheduled spend and its projected age.

    CRITICAL: When the money for a scheduled spend hasn't been
    earned yet, `age_in_days` and `earned_date` are None.
    This is a valid outcome, not an error.
    """

    model_config = ConfigDict(frozen=True)

    age_in_days: Optional[int] = None
    earned_date: Optional[date] = None
    spend_date: date
    amount: int = Field(..., gt=0)
    account_name: str = ""
    payee_name: str = ""

    @property
    def not_earned_yet(self) -> bool:
        return self.age_in_days is None


class AgeOfMoneyReport(BaseModel):
    """Everything one age-of-money run produces."""

    realized: list[AgedSpend] = Field(default_factory=list)
    thresholds: list[SpendingThreshold] = Field(default_factory=list)
    projected: list[ProjectedSpend] = Field(default_factory=list)

    final_state: AllocatorState = Field(default_factory=AllocatorState)
    bucket_count: int = Field(
        default=0,
        description="Number of historical income buckets"
    )
    total_earned: int = Field(
        default=0,
        description="Sum of all historical buckets (milliunits)"
    )
    total_spent: int = Field(
        default=0,
        description="Sum of all historical spending (milliunits, positive)"
    )

    @property
    def budget_difference(self) -> int:
        """Earned minus spent; what's still unspent."""
        return self.total_earned - self.total_spent

    @property
    def current_age(self) -> Optional[int]:
        """Age of the most recent realized spend, if any."""
        if not self.realized:
            return None
        return self.realized[-1].age_in_days
