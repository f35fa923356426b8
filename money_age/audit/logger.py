"""
Audit Logger

DESIGN DECISION: Every step of an age-of-money run is logged.
This provides:
1. Traceability of what the computation saw
2. Debugging capability when a ledger is inconsistent
3. A run history the dashboard can show

The audit logger:
- Writes structured JSON logs through structlog
- Keeps the events of the current process in memory (no persistence)
- Supports correlation IDs to trace the events of one run
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from money_age.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from money_age.models.validation import LedgerValidationResult


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and remembers them
    for the lifetime of the logger.
    """

    def __init__(self, max_events: int = 1000):
        """
        Initialize audit logger.

        Args:
            max_events: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("money_age.audit")
        self._events: list[AuditEvent] = []
        self._max_events = max_events

    @property
    def events(self) -> list[AuditEvent]:
        """Recorded events, oldest first."""
        return list(self._events)

    def events_for(self, correlation_id: UUID) -> list[AuditEvent]:
        """All events of one run, oldest first."""
        return [e for e in self._events if e.correlation_id == correlation_id]

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)
        if len(self._events) > self._max_events:
            del self._events[: len(self._events) - self._max_events]

    def log_ledger_loaded(
        self,
        budget_id: Optional[str],
        source: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        """Log a successful ledger load."""
        self.log(AuditEventBuilder.ledger_loaded(
            budget_id=budget_id,
            source=source,
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_ledger_load_failed(
        self,
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed ledger load."""
        self.log(AuditEventBuilder.ledger_load_failed(
            source=source,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_validation(
        self,
        result: LedgerValidationResult,
        correlation_id: UUID,
    ) -> None:
        """Log the outcome of ledger validation."""
        if result.errors:
            event = AuditEventBuilder.ledger_validation_failed(
                budget_id=result.budget_id,
                issues=[issue.model_dump(mode="json") for issue in result.errors],
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.ledger_validated(
                budget_id=result.budget_id,
                warning_count=len(result.warnings),
                correlation_id=correlation_id,
            )
        self.log(event)

    def log_buckets_built(
        self,
        budget_id: Optional[str],
        bucket_count: int,
        total_earned: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.buckets_built(
            budget_id=budget_id,
            bucket_count=bucket_count,
            total_earned=total_earned,
            correlation_id=correlation_id,
        ))

    def log_spending_allocated(
        self,
        budget_id: Optional[str],
        spend_count: int,
        current_age: Optional[int],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.spending_allocated(
            budget_id=budget_id,
            spend_count=spend_count,
            current_age=current_age,
            correlation_id=correlation_id,
        ))

    def log_projection_completed(
        self,
        budget_id: Optional[str],
        projected_count: int,
        not_earned_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.projection_completed(
            budget_id=budget_id,
            projected_count=projected_count,
            not_earned_count=not_earned_count,
            correlation_id=correlation_id,
        ))

    def log_data_inconsistency(
        self,
        budget_id: Optional[str],
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        """Log a fatal ledger inconsistency."""
        self.log(AuditEventBuilder.data_inconsistency(
            budget_id=budget_id,
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    def log_flows_reported(
        self,
        budget_id: Optional[str],
        period: Optional[str],
        inflow_count: int,
        outflow_count: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.flows_reported(
            budget_id=budget_id,
            period=period,
            inflow_count=inflow_count,
            outflow_count=outflow_count,
            correlation_id=correlation_id,
        ))

    def log_transactions_exported(
        self,
        budget_id: Optional[str],
        row_count: int,
        since: Optional[str],
        category: Optional[str],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.transactions_exported(
            budget_id=budget_id,
            row_count=row_count,
            since=since,
            category=category,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking the events of one run.

    Pass it through every step of the run.
    """
    return uuid4()
