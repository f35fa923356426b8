"""
Main Orchestrator for Age of Money

This module ties together all the components and defines the
end-to-end flows for:
1. Age of money (load -> validate -> classify -> FIFO -> thresholds -> projection)
2. Net worth flows (load -> classify -> rank)
3. Transaction export (load -> filter -> CSV)

DESIGN DECISION: The orchestrator enforces the boundaries:
- All I/O happens before the core runs
- An inconsistent ledger never produces a partial report
- Every step is audited

The core modules stay pure; this is where settings are read.
"""

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from money_age.aging.engine import compute_age_of_money
from money_age.audit import AuditLogger, create_correlation_id
from money_age.config import AgingSettings, get_settings
from money_age.errors import (
    DataInconsistencyError,
    InvalidLedgerError,
    LedgerSourceError,
    NoIncomeError,
)
from money_age.models.aging import AgeOfMoneyReport
from money_age.models.export import ExportRow
from money_age.models.flows import FlowsReport
from money_age.models.ledger import LedgerSnapshot
from money_age.models.validation import LedgerValidationResult
from money_age.reports.export import export_rows, parse_since, render_csv
from money_age.reports.flows import largest_flows, parse_period
from money_age.services.ledger import JsonFileLedgerSource, LedgerSourceInterface
from money_age.validation import LedgerValidator


class LedgerLoader:
    """
    Loads a snapshot from a ledger source and audits the load.

    Shared by both flows.
    """

    def __init__(
        self,
        source: LedgerSourceInterface,
        audit_logger: AuditLogger,
    ):
        self._source = source
        self._audit_logger = audit_logger

    async def load(
        self,
        budget_name: Optional[str],
        correlation_id: UUID,
    ) -> LedgerSnapshot:
        """
        Load one budget's snapshot.

        Raises:
            LedgerSourceError: If loading fails
        """
        try:
            snapshot = await self._source.load_snapshot(budget_name)
        except LedgerSourceError as e:
            self._audit_logger.log_ledger_load_failed(
                source=self._source.description,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_ledger_loaded(
            budget_id=snapshot.budget.id if snapshot.budget else None,
            source=self._source.description,
            counts={
                "accounts": len(snapshot.accounts),
                "transactions": len(snapshot.transactions),
                "scheduled_transactions": len(snapshot.scheduled_transactions),
                "category_groups": len(snapshot.category_groups),
            },
            correlation_id=correlation_id,
        )
        return snapshot


class AgeOfMoneyFlow:
    """
    Orchestrates the age-of-money computation.

    Flow:
    1. Load     -> snapshot from the ledger source
    2. Validate -> references and bookkeeping; errors abort
    3. Compute  -> realized ages, thresholds, projections
    """

    def __init__(
        self,
        source: Optional[LedgerSourceInterface] = None,
        validator: Optional[LedgerValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AgingSettings] = None,
    ):
        self._audit_logger = audit_logger or AuditLogger()
        self._loader = LedgerLoader(source or JsonFileLedgerSource(), self._audit_logger)
        self._validator = validator or LedgerValidator()
        self._settings = settings or get_settings().aging

    def validate(
        self,
        snapshot: LedgerSnapshot,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerValidationResult:
        """
        Validate a snapshot, raising if it can't be aged.

        Raises:
            NoIncomeError: If the ledger has no income at all
            InvalidLedgerError: If any other error-level issue was found
        """
        correlation_id = correlation_id or create_correlation_id()
        result = self._validator.validate(
            snapshot, drop_deleted=self._settings.drop_deleted
        )
        self._audit_logger.log_validation(result, correlation_id)

        errors = result.errors
        if not errors:
            return result
        if all(issue.issue_type == "no_income" for issue in errors):
            raise NoIncomeError(errors[0].message)
        raise InvalidLedgerError(
            self._validator.get_summary(result),
            issues=errors,
        )

    def compute(
        self,
        snapshot: LedgerSnapshot,
        now: Optional[datetime] = None,
        include_scheduled_income: Optional[bool] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AgeOfMoneyReport:
        """
        Compute age of money for a snapshot.

        Raises:
            DataInconsistencyError: If the ledger is inconsistent
            NoIncomeError: If the ledger has no income at all
        """
        correlation_id = correlation_id or create_correlation_id()
        budget_id = snapshot.budget.id if snapshot.budget else None
        if include_scheduled_income is None:
            include_scheduled_income = self._settings.include_scheduled_income
        if self._settings.drop_deleted:
            snapshot = snapshot.without_deleted()

        try:
            report = compute_age_of_money(
                snapshot,
                include_scheduled_income=include_scheduled_income,
                now=now,
                threshold_max_buckets=self._settings.threshold_max_buckets,
                threshold_max_amount=self._settings.threshold_max_amount,
            )
        except DataInconsistencyError as e:
            self._audit_logger.log_data_inconsistency(budget_id, e, correlation_id)
            raise

        self._audit_logger.log_buckets_built(
            budget_id=budget_id,
            bucket_count=report.bucket_count,
            total_earned=report.total_earned,
            correlation_id=correlation_id,
        )
        self._audit_logger.log_spending_allocated(
            budget_id=budget_id,
            spend_count=len(report.realized),
            current_age=report.current_age,
            correlation_id=correlation_id,
        )
        if snapshot.scheduled_transactions:
            self._audit_logger.log_projection_completed(
                budget_id=budget_id,
                projected_count=len(report.projected),
                not_earned_count=sum(1 for p in report.projected if p.not_earned_yet),
                correlation_id=correlation_id,
            )
        return report

    async def run(
        self,
        budget_name: Optional[str] = None,
        now: Optional[datetime] = None,
        include_scheduled_income: Optional[bool] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[AgeOfMoneyReport, LedgerValidationResult]:
        """
        Full flow: load, validate, compute.

        Returns:
            (report, validation_result)
        """
        correlation_id = correlation_id or create_correlation_id()
        snapshot = await self._loader.load(budget_name, correlation_id)
        validation = self.validate(snapshot, correlation_id)
        report = self.compute(
            snapshot,
            now=now,
            include_scheduled_income=include_scheduled_income,
            correlation_id=correlation_id,
        )
        return report, validation


class FlowsReportFlow:
    """
    Orchestrates the largest inflows/outflows report.

    Flow:
    1. Load   -> snapshot from the ledger source
    2. Filter -> period and excluded accounts
    3. Rank   -> inflows and outflows of net worth
    """

    def __init__(
        self,
        source: Optional[LedgerSourceInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AgingSettings] = None,
    ):
        self._audit_logger = audit_logger or AuditLogger()
        self._loader = LedgerLoader(source or JsonFileLedgerSource(), self._audit_logger)
        self._settings = settings or get_settings().aging

    def compute(
        self,
        snapshot: LedgerSnapshot,
        month: Optional[str] = None,
        year: Optional[str] = None,
        exclude_accounts: Iterable[str] = (),
        correlation_id: Optional[UUID] = None,
    ) -> FlowsReport:
        """
        Rank net worth flows for a snapshot.

        Raises:
            PeriodError: If the month/year filter is invalid
            DataInconsistencyError: If an account reference doesn't resolve
        """
        correlation_id = correlation_id or create_correlation_id()
        budget_id = snapshot.budget.id if snapshot.budget else None
        period = parse_period(month=month, year=year)
        if self._settings.drop_deleted:
            snapshot = snapshot.without_deleted()

        try:
            report = largest_flows(snapshot, period=period, exclude_accounts=exclude_accounts)
        except DataInconsistencyError as e:
            self._audit_logger.log_data_inconsistency(budget_id, e, correlation_id)
            raise

        self._audit_logger.log_flows_reported(
            budget_id=budget_id,
            period=period.label if period else None,
            inflow_count=len(report.inflows),
            outflow_count=len(report.outflows),
            correlation_id=correlation_id,
        )
        return report

    async def run(
        self,
        budget_name: Optional[str] = None,
        month: Optional[str] = None,
        year: Optional[str] = None,
        exclude_accounts: Iterable[str] = (),
        correlation_id: Optional[UUID] = None,
    ) -> FlowsReport:
        """Full flow: load, filter, rank."""
        correlation_id = correlation_id or create_correlation_id()
        # Reject a bad period before touching the ledger
        parse_period(month=month, year=year)
        snapshot = await self._loader.load(budget_name, correlation_id)
        return self.compute(
            snapshot,
            month=month,
            year=year,
            exclude_accounts=exclude_accounts,
            correlation_id=correlation_id,
        )


class ExportFlow:
    """
    Orchestrates the CSV transaction export.

    Flow:
    1. Load   -> snapshot from the ledger source
    2. Filter -> start date and category
    3. Write  -> CSV text
    """

    def __init__(
        self,
        source: Optional[LedgerSourceInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AgingSettings] = None,
    ):
        self._audit_logger = audit_logger or AuditLogger()
        self._loader = LedgerLoader(source or JsonFileLedgerSource(), self._audit_logger)
        self._settings = settings or get_settings().aging

    def compute(
        self,
        snapshot: LedgerSnapshot,
        since: Optional[str] = None,
        category: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ExportRow]:
        """
        Select the rows to export from a snapshot.

        Raises:
            PeriodError: If the start date can't be parsed
        """
        correlation_id = correlation_id or create_correlation_id()
        start = parse_since(since)
        if self._settings.drop_deleted:
            snapshot = snapshot.without_deleted()

        rows = export_rows(snapshot, since=start, category=category or None)

        self._audit_logger.log_transactions_exported(
            budget_id=snapshot.budget.id if snapshot.budget else None,
            row_count=len(rows),
            since=start.isoformat() if start else None,
            category=category or None,
            correlation_id=correlation_id,
        )
        return rows

    async def run(
        self,
        budget_name: Optional[str] = None,
        since: Optional[str] = None,
        category: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """Full flow: load, filter, write. Returns the CSV text."""
        correlation_id = correlation_id or create_correlation_id()
        # Reject a bad start date before touching the ledger
        parse_since(since)
        snapshot = await self._loader.load(budget_name, correlation_id)
        rows = self.compute(
            snapshot,
            since=since,
            category=category,
            correlation_id=correlation_id,
        )
        return render_csv(rows)


def create_app_components(
    data_dir: Optional[str] = None,
) -> tuple[AgeOfMoneyFlow, FlowsReportFlow, ExportFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        data_dir: Directory of exported API responses.
                  Defaults to the LEDGER_DATA_DIR setting.

    Returns:
        (age_of_money_flow, flows_report_flow, export_flow, audit_logger)
    """
    audit_logger = AuditLogger()
    source = JsonFileLedgerSource(data_dir)

    age_flow = AgeOfMoneyFlow(
        source=source,
        audit_logger=audit_logger,
    )
    flows_flow = FlowsReportFlow(
        source=source,
        audit_logger=audit_logger,
    )
    export_flow = ExportFlow(
        source=source,
        audit_logger=audit_logger,
    )
    return age_flow, flows_flow, export_flow, audit_logger
