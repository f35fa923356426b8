"""
Audit Models for Age of Money

Every step of an age-of-money run is recorded as an audit event.
This provides:
1. Traceability of what the computation saw and decided
2. Debugging information when a ledger turns out to be inconsistent
3. A readable run history for the dashboard

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger loading
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"

    # Validation
    LEDGER_VALIDATED = "ledger_validated"
    LEDGER_VALIDATION_FAILED = "ledger_validation_failed"

    # Computation
    BUCKETS_BUILT = "buckets_built"
    SPENDING_ALLOCATED = "spending_allocated"
    PROJECTION_COMPLETED = "projection_completed"
    DATA_INCONSISTENCY = "data_inconsistency"

    # Reports
    FLOWS_REPORTED = "flows_reported"
    TRANSACTIONS_EXPORTED = "transactions_exported"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which budget is this about?
    budget_id: Optional[str] = Field(
        default=None,
        description="Budget the run was computed for"
    )

    # Correlation - for tracking the events of one run
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one run"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "budget_id": self.budget_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.ledger_loaded(budget_id, source, counts, correlation_id)
        event = AuditEventBuilder.data_inconsistency(budget_id, error_type, message, correlation_id)
    """

    @staticmethod
    def ledger_loaded(
        budget_id: Optional[str],
        source: str,
        counts: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Ledger loaded from {source}",
            details={
                "source": source,
                **counts,
            },
        )

    @staticmethod
    def ledger_load_failed(
        source: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Could not load ledger from {source}",
            error_message=error_message,
            details={"source": source},
        )

    @staticmethod
    def ledger_validated(
        budget_id: Optional[str],
        warning_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_VALIDATED,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Ledger validated with {warning_count} warnings",
            details={"warning_count": warning_count},
        )

    @staticmethod
    def ledger_validation_failed(
        budget_id: Optional[str],
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_VALIDATION_FAILED,
            severity=AuditSeverity.ERROR,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Ledger validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def buckets_built(
        budget_id: Optional[str],
        bucket_count: int,
        total_earned: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUCKETS_BUILT,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Built {bucket_count} income buckets",
            details={
                "bucket_count": bucket_count,
                "total_earned": total_earned,
            },
        )

    @staticmethod
    def spending_allocated(
        budget_id: Optional[str],
        spend_count: int,
        current_age: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPENDING_ALLOCATED,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Allocated {spend_count} spending events",
            details={
                "spend_count": spend_count,
                "current_age": current_age,
            },
        )

    @staticmethod
    def projection_completed(
        budget_id: Optional[str],
        projected_count: int,
        not_earned_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if not_earned_count else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.PROJECTION_COMPLETED,
            severity=severity,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Projected {projected_count} scheduled transactions",
            details={
                "projected_count": projected_count,
                "not_earned_count": not_earned_count,
            },
        )

    @staticmethod
    def data_inconsistency(
        budget_id: Optional[str],
        error_type: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_INCONSISTENCY,
            severity=AuditSeverity.ERROR,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Ledger is inconsistent: {error_type}",
            error_code=error_type,
            error_message=error_message,
        )

    @staticmethod
    def flows_reported(
        budget_id: Optional[str],
        period: Optional[str],
        inflow_count: int,
        outflow_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FLOWS_REPORTED,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Flows report for {period or 'all time'}",
            details={
                "period": period,
                "inflow_count": inflow_count,
                "outflow_count": outflow_count,
            },
        )

    @staticmethod
    def transactions_exported(
        budget_id: Optional[str],
        row_count: int,
        since: Optional[str],
        category: Optional[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_EXPORTED,
            budget_id=budget_id,
            correlation_id=correlation_id,
            description=f"Exported {row_count} transactions",
            details={
                "row_count": row_count,
                "since": since,
                "category": category,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
