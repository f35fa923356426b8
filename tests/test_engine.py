"""
End-to-end tests of the age of money computation over a snapshot.
"""

import pytest
from datetime import date, datetime, timezone

from money_age.aging import compute_age_of_money
from money_age.errors import NoIncomeError, OverspentError, UnknownAccountError


NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)


@pytest.fixture
def household(make_tx, make_scheduled, make_snapshot):
    """A small month of household activity."""
    transactions = [
        make_tx("chk", 300000, "2024-01-01", payee="Employer"),
        make_tx("chk", -120000, "2024-01-02", payee="Landlord"),
        make_tx("visa", -40000, "2024-01-05", payee="Grocer"),
        make_tx("chk", 200000, "2024-01-15", payee="Employer"),
        make_tx("chk", -40000, "2024-01-20", payee="Transfer : Visa", transfer_to="visa"),
        make_tx("visa", 40000, "2024-01-20", payee="Transfer : Checking", transfer_to="chk"),
        make_tx("chk", -50000, "2024-01-25", payee="Transfer : Savings", transfer_to="sav"),
        make_tx("sav", 50000, "2024-01-25", payee="Transfer : Checking", transfer_to="chk"),
        make_tx("chk", -160000, "2024-01-28", payee="Utility"),
    ]
    scheduled = [
        make_scheduled("chk", -120000, "2024-02-02", payee="Landlord"),
        make_scheduled("chk", -300000, "2024-02-10", payee="Car"),
    ]
    return make_snapshot(transactions, scheduled)


class TestComputeAgeOfMoney:
    """Tests for the full computation."""

    def test_realized_ages(self, household):
        """Test the age of each historical spend."""
        report = compute_age_of_money(household, now=NOW)

        assert [(s.payee_name, s.age_in_days) for s in report.realized] == [
            ("Landlord", 1),
            ("Transfer : Checking", 19),
            ("Utility", 13),
        ]
        assert report.current_age == 13
        assert report.bucket_count == 2

    def test_totals(self, household):
        """Test earned, spent and their difference."""
        report = compute_age_of_money(household, now=NOW)
        assert report.total_earned == 500000
        assert report.total_spent == 320000
        assert report.budget_difference == 180000

    def test_thresholds_from_final_state(self, household):
        """Test thresholds start at what's left of the second paycheck."""
        report = compute_age_of_money(household, now=NOW)

        assert report.final_state.current_bucket_index == 1
        assert report.final_state.bucket_spent_so_far == 20000
        assert len(report.thresholds) == 1
        assert report.thresholds[0].bucket_date == date(2024, 1, 15)
        assert report.thresholds[0].cumulative_amount == 180000
        assert report.thresholds[0].age_if_spent_today == 16

    def test_projection(self, household):
        """Test the first bill is funded and the next one isn't."""
        report = compute_age_of_money(household, now=NOW)

        assert len(report.projected) == 2
        assert report.projected[0].age_in_days == 18
        assert report.projected[1].not_earned_yet

    def test_no_income(self, make_tx, make_snapshot):
        """Test that a ledger without income can't be aged."""
        snapshot = make_snapshot([make_tx("chk", -1000, "2024-01-01")])
        with pytest.raises(NoIncomeError, match="without any money"):
            compute_age_of_money(snapshot, now=NOW)

    def test_overspent_history(self, make_tx, make_snapshot):
        """Test that spending more than was ever earned is reported."""
        snapshot = make_snapshot([
            make_tx("chk", 1000, "2024-01-01"),
            make_tx("chk", -1500, "2024-01-02"),
        ])
        with pytest.raises(OverspentError):
            compute_age_of_money(snapshot, now=NOW)

    def test_unknown_account(self, make_tx, make_snapshot):
        """Test that a dangling reference aborts the whole run."""
        snapshot = make_snapshot([
            make_tx("chk", 1000, "2024-01-01"),
            make_tx("chk", -500, "2024-01-02", transfer_to="closed-and-purged"),
        ])
        with pytest.raises(UnknownAccountError):
            compute_age_of_money(snapshot, now=NOW)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
