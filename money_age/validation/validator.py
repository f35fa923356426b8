"""
Two-Stage Ledger Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - REFERENCE VALIDATION:
- Every transaction's account id resolves
- Every transfer account id resolves
- Same for scheduled transactions
This catches snapshots that are internally broken. When deleted
records are going to be dropped, their references aren't checked.

STAGE 2 - SEMANTIC VALIDATION:
- History doesn't spend more than was ever earned
- Deleted records are flagged
- Income that isn't in date order is noted
- A ledger with no income is flagged
This only runs when stage 1 passes, because it needs to classify.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the orchestrator decides what to do.
"""

from typing import Optional

from money_age.aging.buckets import buckets_from, classify_for_aging, spending_from
from money_age.classification.policy import MovementKind
from money_age.models.ledger import LedgerSnapshot
from money_age.models.validation import (
    IssueSeverity,
    LedgerValidationResult,
    ValidationIssue,
)


class LedgerValidator:
    """Validates a ledger snapshot before age of money is computed."""

    def _validate_references(
        self,
        snapshot: LedgerSnapshot,
        drop_deleted: bool = False,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Reference validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        known = snapshot.account_map

        records = [("transaction", tx) for tx in snapshot.transactions]
        records += [("scheduled_transaction", s) for s in snapshot.scheduled_transactions]

        for record_type, record in records:
            if drop_deleted and record.deleted:
                continue
            if record.account_id not in known:
                issues.append(ValidationIssue(
                    record_type=record_type,
                    record_id=record.id,
                    issue_type="unknown_account",
                    message=f"unknown account: {record.account_id}",
                    severity=IssueSeverity.ERROR,
                ))
            if record.transfer_account_id and record.transfer_account_id not in known:
                issues.append(ValidationIssue(
                    record_type=record_type,
                    record_id=record.id,
                    issue_type="unknown_transfer_account",
                    message=f"could not find transfer acct id: {record.transfer_account_id}",
                    severity=IssueSeverity.ERROR,
                ))

        return not issues, issues

    def _validate_semantic(
        self,
        snapshot: LedgerSnapshot,
    ) -> tuple[bool, list[ValidationIssue], int, int]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues, total_earned, total_spent)
        """
        issues = []

        for tx in snapshot.transactions:
            if tx.deleted:
                issues.append(ValidationIssue(
                    record_type="transaction",
                    record_id=tx.id,
                    issue_type="deleted",
                    message=f"Transaction {tx.id} is marked deleted",
                    severity=IssueSeverity.WARNING,
                ))
        for item in snapshot.scheduled_transactions:
            if item.deleted:
                issues.append(ValidationIssue(
                    record_type="scheduled_transaction",
                    record_id=item.id,
                    issue_type="deleted",
                    message=f"Scheduled transaction {item.id} is marked deleted",
                    severity=IssueSeverity.WARNING,
                ))

        live = snapshot.without_deleted()
        classified = classify_for_aging(live.transactions, live.account_map)
        income_dates = [c.transaction.date for c in classified if c.kind is MovementKind.INCOME]
        total_earned = sum(bucket.amount for bucket in buckets_from(classified))
        total_spent = sum(event.amount for event in spending_from(classified))

        if income_dates != sorted(income_dates):
            issues.append(ValidationIssue(
                record_type="ledger",
                issue_type="unordered_income",
                message="Income isn't in date order in the ledger; it will be sorted",
                severity=IssueSeverity.INFO,
            ))

        if not income_dates:
            issues.append(ValidationIssue(
                record_type="ledger",
                issue_type="no_income",
                message="Can't generate age of money without any money!",
                severity=IssueSeverity.ERROR,
            ))
        elif total_spent > total_earned:
            issues.append(ValidationIssue(
                record_type="ledger",
                issue_type="overspent",
                message=(
                    f"History spends {total_spent - total_earned} milliunits "
                    "more than was ever earned"
                ),
                severity=IssueSeverity.ERROR,
            ))

        is_valid = not any(issue.severity is IssueSeverity.ERROR for issue in issues)
        return is_valid, issues, total_earned, total_spent

    def validate(
        self,
        snapshot: LedgerSnapshot,
        drop_deleted: bool = False,
    ) -> LedgerValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            snapshot: The ledger to check
            drop_deleted: Deleted records will be dropped before aging,
                          so their references don't matter

        Returns:
            LedgerValidationResult with all issues found
        """
        references_valid, issues = self._validate_references(snapshot, drop_deleted)

        semantic_valid = False
        total_earned: Optional[int] = None
        total_spent: Optional[int] = None
        if references_valid:
            semantic_valid, semantic_issues, total_earned, total_spent = (
                self._validate_semantic(snapshot)
            )
            issues.extend(semantic_issues)

        return LedgerValidationResult(
            budget_id=snapshot.budget.id if snapshot.budget else None,
            references_valid=references_valid,
            semantic_valid=semantic_valid,
            issues=issues,
            total_earned=total_earned,
            total_spent=total_spent,
        )

    def get_summary(self, result: LedgerValidationResult) -> str:
        """Plain-language summary of a validation result."""
        if result.is_valid and not result.warnings:
            return "✅ Ledger looks consistent."

        lines = []
        if result.errors:
            lines.append("❌ The ledger can't be aged:")
            for issue in result.errors:
                lines.append(f"   • {issue.message}")

        if result.warnings:
            lines.append("")
            lines.append("⚠️ Please note:")
            for issue in result.warnings:
                lines.append(f"   • {issue.message}")

        return "\n".join(lines).strip()
