"""
Tests for spending thresholds and scheduled projections.
"""

import pytest
from datetime import date, datetime, timezone

from money_age.aging import (
    FifoAllocator,
    days_since,
    project_scheduled,
    sort_scheduled,
    upcoming_thresholds,
)
from money_age.errors import UnknownAccountError
from money_age.models.aging import Bucket


NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)


def bucket(amount, day, payee=""):
    return Bucket(date=date.fromisoformat(day), amount=amount, payee_name=payee)


@pytest.fixture
def allocator():
    """Three buckets, 70.00 already spent: 20.00 into the second one."""
    allocator = FifoAllocator([
        bucket(50000, "2024-01-01", payee="A"),
        bucket(50000, "2024-01-05", payee="B"),
        bucket(80000, "2024-01-08", payee="C"),
    ])
    allocator.consume(70000)
    return allocator


class TestThresholds:
    """Tests for upcoming spending thresholds."""

    def test_days_since_midnight_utc(self):
        """Test day counts from midnight UTC, rounded from hours."""
        assert days_since(date(2024, 1, 5), NOW) == 10
        noon = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
        assert days_since(date(2024, 1, 5), noon) == 11
        before_noon = datetime(2024, 1, 15, 11, 59, tzinfo=timezone.utc)
        assert days_since(date(2024, 1, 5), before_noon) == 10

    def test_thresholds_start_at_cursor(self, allocator):
        """Test the first threshold is net of what's already spent."""
        thresholds = upcoming_thresholds(allocator, now=NOW)

        assert [t.payee_name for t in thresholds] == ["B", "C"]
        assert thresholds[0].cumulative_amount == 30000
        assert thresholds[1].cumulative_amount == 110000
        assert thresholds[0].age_if_spent_today == 9
        assert thresholds[1].age_if_spent_today == 6

    def test_max_buckets(self, allocator):
        """Test the entry count limit."""
        thresholds = upcoming_thresholds(allocator, now=NOW, max_buckets=1)
        assert len(thresholds) == 1

    def test_entry_crossing_max_amount_is_included(self, allocator):
        """Test that listing stops after the entry passing the amount limit."""
        assert len(upcoming_thresholds(allocator, now=NOW, max_amount=20000)) == 1
        assert len(upcoming_thresholds(allocator, now=NOW, max_amount=30000)) == 2

    def test_no_thresholds_when_exhausted(self):
        """Test that a fully spent allocator has no thresholds."""
        allocator = FifoAllocator([bucket(1000, "2024-01-01")])
        allocator.consume(1000)
        assert upcoming_thresholds(allocator, now=NOW) == []

    def test_thresholds_do_not_move_cursor(self, allocator):
        """Test that listing thresholds leaves the allocator alone."""
        before = allocator.state
        upcoming_thresholds(allocator, now=NOW)
        assert allocator.state == before


class TestProjection:
    """Tests for projecting scheduled transactions."""

    def test_unfunded_spend_is_not_earned_yet(self, accounts, make_scheduled):
        """Test that running out of money is a result, not an error."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [make_scheduled("chk", -25000, "2024-02-01", payee="Insurance")]

        projected = project_scheduled(allocator, scheduled, accounts)

        assert len(projected) == 1
        assert projected[0].not_earned_yet
        assert projected[0].earned_date is None
        assert projected[0].amount == 25000
        assert projected[0].payee_name == "Insurance"

    def test_projection_continues_from_cursor(self, allocator, accounts, make_scheduled):
        """Test that projection picks up where history stopped."""
        scheduled = [
            make_scheduled("chk", -30000, "2024-02-01"),
            make_scheduled("chk", -10000, "2024-02-03"),
        ]
        projected = project_scheduled(allocator, scheduled, accounts)

        assert [p.earned_date for p in projected] == [date(2024, 1, 5), date(2024, 1, 8)]
        assert projected[0].age_in_days == 27
        assert projected[1].age_in_days == 26

    def test_stops_after_first_unfunded_spend(self, accounts, make_scheduled):
        """Test that nothing is listed after the money runs out."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [
            make_scheduled("chk", -5000, "2024-02-01"),
            make_scheduled("chk", -8000, "2024-02-02"),
            make_scheduled("chk", -100, "2024-02-03"),
        ]
        projected = project_scheduled(allocator, scheduled, accounts)

        assert len(projected) == 2
        assert not projected[0].not_earned_yet
        assert projected[1].not_earned_yet

    def test_scheduled_card_payment_is_spending(self, allocator, accounts, make_scheduled):
        """Test a scheduled cash -> credit card payment is projected."""
        scheduled = [make_scheduled("chk", -30000, "2024-02-01", transfer_to="visa")]
        projected = project_scheduled(allocator, scheduled, accounts)
        assert len(projected) == 1
        assert projected[0].amount == 30000

    def test_scheduled_income_skipped_by_default(self, accounts, make_scheduled):
        """Test that scheduled income doesn't fund spending unless asked."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [
            make_scheduled("chk", 50000, "2024-02-01", payee="Employer"),
            make_scheduled("chk", -20000, "2024-02-02"),
        ]
        projected = project_scheduled(allocator, scheduled, accounts)
        assert projected[0].not_earned_yet

    def test_scheduled_income_funds_later_spending(self, accounts, make_scheduled):
        """Test scheduled income becomes a future bucket when enabled."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [
            make_scheduled("chk", -20000, "2024-02-02"),
            make_scheduled("chk", 50000, "2024-02-01", payee="Employer"),
        ]
        projected = project_scheduled(
            allocator, scheduled, accounts, include_scheduled_income=True,
        )

        assert len(projected) == 1
        assert projected[0].earned_date == date(2024, 2, 1)
        assert projected[0].age_in_days == 1
        assert allocator.buckets[-1].projected

    def test_off_budget_transfer_in_is_income(self, accounts, make_scheduled):
        """Test a transfer out of an off-budget account into cash counts as income."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [make_scheduled("brk", -40000, "2024-02-01", transfer_to="chk")]

        project_scheduled(allocator, scheduled, accounts, include_scheduled_income=True)

        added = allocator.buckets[-1]
        assert added.amount == 40000
        assert added.account_name == "Checking"
        assert allocator.remaining_capacity() == 50000

    def test_transfer_into_off_budget_cash_is_not_income(self, accounts, make_scheduled):
        """Test a transfer whose target isn't on-budget cash adds no bucket."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        scheduled = [
            make_scheduled("brk", -40000, "2024-02-01", transfer_to="rsv"),
            make_scheduled("brk", -40000, "2024-02-01", transfer_to="visa"),
        ]
        project_scheduled(allocator, scheduled, accounts, include_scheduled_income=True)
        assert len(allocator.buckets) == 1

    def test_sort_scheduled(self, make_scheduled):
        """Test scheduled order: by next date, then larger amounts first."""
        items = [
            make_scheduled("chk", -1000, "2024-02-02", payee="small"),
            make_scheduled("chk", -9000, "2024-02-02", payee="large"),
            make_scheduled("chk", -5000, "2024-02-01", payee="early"),
        ]
        assert [s.payee_name for s in sort_scheduled(items)] == ["early", "large", "small"]

    def test_unknown_account_raises(self, accounts, make_scheduled):
        """Test a scheduled transaction in an unknown account."""
        allocator = FifoAllocator([bucket(10000, "2024-01-01")])
        with pytest.raises(UnknownAccountError):
            project_scheduled(allocator, [make_scheduled("ghost", -10, "2024-02-01")], accounts)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
