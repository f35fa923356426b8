"""
Net Worth Flow Models

Results of the "largest inflows and outflows" report: money that
entered or left the household as a whole, as opposed to money
moving between its own accounts.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportPeriod(BaseModel):
    """A half-open [start, end) date range."""

    model_config = ConfigDict(frozen=True)

    label: str
    start: date
    end: date

    @model_validator(mode='after')
    def validate_range(self) -> 'ReportPeriod':
        if self.end <= self.start:
            raise ValueError("Period end must be after start")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


class FlowEntry(BaseModel):
    """One inflow or outflow with the running total up to it."""

    model_config = ConfigDict(frozen=True)

    date: date
    amount: int = Field(
        ...,
        description="Signed amount in milliunits"
    )
    running_total: int = Field(
        ...,
        description="Sum of this entry and every larger one before it"
    )
    account_name: str = ""
    payee_name: str = ""
    memo: str = ""


class FlowsReport(BaseModel):
    """Ranked inflows and outflows of net worth."""

    period: Optional[ReportPeriod] = None
    inflows: list[FlowEntry] = Field(default_factory=list)
    outflows: list[FlowEntry] = Field(default_factory=list)

    @property
    def inflow_total(self) -> int:
        return sum(entry.amount for entry in self.inflows)

    @property
    def outflow_total(self) -> int:
        return sum(entry.amount for entry in self.outflows)

    @property
    def balance(self) -> int:
        """Net change in net worth over the period."""
        return self.inflow_total + self.outflow_total
