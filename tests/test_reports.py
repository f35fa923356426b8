"""
Tests for the net worth flows report and text formatting.
"""

import pytest
from datetime import date

from money_age.errors import PeriodError
from money_age.models.aging import (
    AgeOfMoneyReport,
    AgedSpend,
    ProjectedSpend,
    SpendingThreshold,
)
from money_age.models.flows import FlowEntry, FlowsReport
from money_age.reports import (
    clean_payee,
    format_amount,
    format_decimal,
    largest_flows,
    parse_period,
    render_age_of_money,
    render_flows,
    render_projected,
    render_table,
)


@pytest.fixture
def flows_snapshot(make_tx, make_snapshot):
    transactions = [
        make_tx("chk", 300000, "2024-03-01", payee="Employer"),
        make_tx("chk", -5000, "2024-03-02", payee="Grocer"),
        make_tx("visa", -20000, "2024-03-03", payee="Airline"),
        make_tx("chk", -50000, "2024-03-10", payee="Transfer : Visa", transfer_to="visa"),
        make_tx("visa", 50000, "2024-03-10", payee="Transfer : Checking", transfer_to="chk"),
        make_tx("visa", 3000, "2024-03-12", payee="Airline", memo="refund"),
        make_tx("chk", -100000, "2024-03-15", payee="Transfer : Brokerage", transfer_to="brk"),
        make_tx("brk", 100000, "2024-03-15", payee="Transfer : Checking", transfer_to="chk"),
        make_tx("brk", 7000, "2024-03-20", payee="Dividend"),
        make_tx("chk", 0, "2024-03-21", payee="Placeholder"),
        make_tx("chk", 90000, "2024-04-01", payee="Employer"),
    ]
    return make_snapshot(transactions)


class TestParsePeriod:
    """Tests for month/year filters."""

    def test_no_filter(self):
        """Test that no filter means all time."""
        assert parse_period() is None

    @pytest.mark.parametrize("month", ["Aug 2019", "August 2019"])
    def test_month(self, month):
        """Test short and long month names."""
        period = parse_period(month=month)
        assert period.start == date(2019, 8, 1)
        assert period.end == date(2019, 9, 1)
        assert period.label == "August 2019"

    def test_december_wraps_year(self):
        """Test that December ends on January 1st of the next year."""
        period = parse_period(month="Dec 2019")
        assert period.end == date(2020, 1, 1)

    def test_year(self):
        """Test a whole-year period."""
        period = parse_period(year="2019")
        assert period.start == date(2019, 1, 1)
        assert period.end == date(2020, 1, 1)
        assert period.label == "2019"

    def test_month_and_year_rejected(self):
        """Test that only one filter may be given."""
        with pytest.raises(PeriodError, match="both"):
            parse_period(month="Aug 2019", year="2019")

    @pytest.mark.parametrize("kwargs", [
        {"month": "2019-08"},
        {"month": "Augusto 2019"},
        {"year": "last year"},
    ])
    def test_unparseable(self, kwargs):
        """Test that bad filters are rejected."""
        with pytest.raises(PeriodError):
            parse_period(**kwargs)


class TestLargestFlows:
    """Tests for ranking net worth flows."""

    def test_inflows_ranked_largest_first(self, flows_snapshot):
        """Test inflows, running totals included."""
        report = largest_flows(flows_snapshot, period=parse_period(month="Mar 2024"))

        assert [(e.payee_name, e.amount) for e in report.inflows] == [
            ("Employer", 300000),
            ("Dividend", 7000),
            ("Airline", 3000),
        ]
        assert [e.running_total for e in report.inflows] == [300000, 307000, 310000]

    def test_outflows_ranked_largest_first(self, flows_snapshot):
        """Test card spending shows up as the card payment."""
        report = largest_flows(flows_snapshot, period=parse_period(month="Mar 2024"))

        assert [(e.payee_name, e.amount) for e in report.outflows] == [
            ("Transfer : Visa", -50000),
            ("Grocer", -5000),
        ]
        assert report.outflows[-1].running_total == -55000
        assert report.balance == 255000

    def test_all_time(self, flows_snapshot):
        """Test that no period counts every month."""
        report = largest_flows(flows_snapshot)
        assert report.period is None
        assert report.inflow_total == 400000

    def test_excluded_accounts(self, flows_snapshot):
        """Test that excluded accounts are left out entirely."""
        report = largest_flows(flows_snapshot, exclude_accounts=["Brokerage", "Visa"])
        assert "Dividend" not in [e.payee_name for e in report.inflows]
        assert "Airline" not in [e.payee_name for e in report.inflows]

    def test_memo_carried(self, flows_snapshot):
        """Test that memos are kept on entries."""
        report = largest_flows(flows_snapshot)
        refund = [e for e in report.inflows if e.payee_name == "Airline"][0]
        assert refund.memo == "refund"


class TestFormatting:
    """Tests for text rendering."""

    @pytest.mark.parametrize("milliunits,expected", [
        (0, "$0.00"),
        (1234567, "$1,234.57"),
        (-1234567, "-$1,234.57"),
        (5, "$0.01"),
        (4, "$0.00"),
        (-120000, "-$120.00"),
        (1000000000, "$1,000,000.00"),
    ])
    def test_format_amount(self, milliunits, expected):
        """Test currency formatting of milliunits."""
        assert format_amount(milliunits) == expected

    def test_format_amount_symbol(self):
        """Test a custom currency symbol."""
        assert format_amount(2500, symbol="€") == "€2.50"

    def test_clean_payee(self):
        """Test tidying transfer payees."""
        assert clean_payee("Transfer : Savings") == "Transfer: Savings"
        assert clean_payee("Grocer") == "Grocer"

    def test_clean_payee_leaves_other_colons(self):
        """Test that only the transfer prefix is rewritten."""
        assert clean_payee("Rent : March") == "Rent : March"
        assert clean_payee("Transfer : Club : Dues") == "Transfer: Club : Dues"

    @pytest.mark.parametrize("milliunits,expected", [
        (0, "0.00"),
        (1234567, "1234.57"),
        (-1234567, "-1234.57"),
        (5, "0.01"),
    ])
    def test_format_decimal(self, milliunits, expected):
        """Test plain decimals for files: no symbol, no separators."""
        assert format_decimal(milliunits) == expected

    def test_render_table_aligns_columns(self):
        """Test column alignment."""
        table = render_table([["1", "long cell", "x"], ["123", "a", "y"]])
        assert table.splitlines() == ["1   long cell x", "123 a         y"]

    def test_render_table_empty(self):
        """Test an empty table."""
        assert render_table([]) == ""

    def test_render_projected_not_earned(self):
        """Test how an unfunded projection is shown."""
        text = render_projected([ProjectedSpend(spend_date=date(2024, 2, 10), amount=300000)])
        assert "N/A" in text
        assert "Not earned yet." in text
        assert "Spend on: 2024-02-10" in text

    def test_render_age_of_money(self):
        """Test the full report sections."""
        report = AgeOfMoneyReport(
            realized=[AgedSpend(
                age_in_days=12,
                earned_date=date(2024, 1, 1),
                spent_date=date(2024, 1, 13),
                amount=45000,
                account_name="Checking",
                payee_name="Grocer",
            )],
            thresholds=[SpendingThreshold(
                age_if_spent_today=30,
                bucket_date=date(2024, 1, 1),
                cumulative_amount=55000,
            )],
            projected=[ProjectedSpend(spend_date=date(2024, 2, 10), amount=300000)],
        )
        text = render_age_of_money(report)

        assert " 12 Earned: 2024-01-01 Spent: 2024-01-13 $45.00 Checking Grocer" in text
        assert "Upcoming spending thresholds (and age if you spent today):" in text
        assert "Projected age of scheduled transactions:" in text
        assert text.endswith("\n")

    def test_render_age_of_money_without_projection(self):
        """Test that the projection section is omitted when empty."""
        text = render_age_of_money(AgeOfMoneyReport())
        assert "Projected age" not in text

    def test_render_flows(self):
        """Test flows headings and quoted memos."""
        report = FlowsReport(
            inflows=[FlowEntry(
                date=date(2024, 3, 1), amount=300000, running_total=300000,
                account_name="Checking", payee_name="Employer", memo="March pay",
            )],
            outflows=[FlowEntry(
                date=date(2024, 3, 2), amount=-5000, running_total=-5000,
                account_name="Checking", payee_name="Grocer",
            )],
        )
        text = render_flows(report)

        assert "Inflows: $300.00" in text
        assert "Outflows: $5.00" in text
        assert '"Employer" "March pay"' in text

    def test_render_flows_stops_after_small_entries(self):
        """Test that long lists are cut once entries become small."""
        entries = [
            FlowEntry(date=date(2024, 3, 1), amount=50000, running_total=50000 * (i + 1),
                      payee_name=f"payee-{i}")
            for i in range(15)
        ]
        text = render_flows(FlowsReport(inflows=entries))
        assert "payee-10" in text
        assert "payee-11" not in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
