"""
Ledger Validation Models

The validator reports what it found as issues rather than fixing
anything silently. Error-level issues stop the computation.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single validation issue found in a ledger snapshot."""

    record_type: str = Field(
        ...,
        description="Kind of record (account, transaction, scheduled_transaction, ledger)"
    )
    record_id: Optional[str] = Field(
        default=None,
        description="ID of the offending record, if any"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g. 'unknown_account', 'deleted', 'overspent')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: IssueSeverity


class LedgerValidationResult(BaseModel):
    """
    Result of the two-stage ledger validation.

    Stage 1: Reference validation (every account id resolves)
    Stage 2: Semantic validation (bookkeeping sanity)
    """

    budget_id: Optional[str] = None

    references_valid: bool = Field(
        ...,
        description="Did every account reference resolve?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )

    issues: list[ValidationIssue] = Field(default_factory=list)

    # Bookkeeping facts, only known when references resolve
    total_earned: Optional[int] = None
    total_spent: Optional[int] = None

    @property
    def is_valid(self) -> bool:
        return self.references_valid and self.semantic_valid

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is IssueSeverity.WARNING]

    @property
    def budget_difference(self) -> Optional[int]:
        if self.total_earned is None or self.total_spent is None:
            return None
        return self.total_earned - self.total_spent
