"""
Data Models Package

This package contains all Pydantic models used in the Age of Money system.
All data flowing through the system must conform to these schemas.
"""

from money_age.models.ledger import (
    CASH_BACKED_TYPES,
    Account,
    AccountType,
    Budget,
    Category,
    CategoryGroup,
    FlagColor,
    LedgerSnapshot,
    ScheduledTransaction,
    Transaction,
)
from money_age.models.aging import (
    AgedSpend,
    AgeOfMoneyReport,
    AllocatorState,
    Bucket,
    ProjectedSpend,
    SpendingEvent,
    SpendingThreshold,
)
from money_age.models.flows import (
    FlowEntry,
    FlowsReport,
    ReportPeriod,
)
from money_age.models.export import ExportRow
from money_age.models.validation import (
    IssueSeverity,
    LedgerValidationResult,
    ValidationIssue,
)
from money_age.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CASH_BACKED_TYPES",
    "Account",
    "AccountType",
    "Budget",
    "Category",
    "CategoryGroup",
    "FlagColor",
    "LedgerSnapshot",
    "ScheduledTransaction",
    "Transaction",
    # Aging models
    "AgedSpend",
    "AgeOfMoneyReport",
    "AllocatorState",
    "Bucket",
    "ProjectedSpend",
    "SpendingEvent",
    "SpendingThreshold",
    # Flow models
    "FlowEntry",
    "FlowsReport",
    "ReportPeriod",
    # Export models
    "ExportRow",
    # Validation models
    "IssueSeverity",
    "LedgerValidationResult",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
