"""
Tests for the CSV transaction export.
"""

import csv
import io
from datetime import date

import pytest

from money_age.errors import PeriodError
from money_age.models.ledger import Category, CategoryGroup, FlagColor
from money_age.reports import (
    EXPORT_COLUMNS,
    category_group_map,
    export_rows,
    parse_since,
    render_csv,
    write_csv,
)


GROUPS = [
    CategoryGroup(id="g1", name="Bills", categories=[
        Category(id="c1", name="Rent"),
        Category(id="c2", name="Power, Water"),
    ]),
    CategoryGroup(id="g2", name="Old Stuff", hidden=True, categories=[
        Category(id="c3", name="Gym"),
    ]),
]


@pytest.fixture
def export_snapshot(make_tx, make_snapshot):
    snapshot = make_snapshot([
        make_tx("chk", 250000, "2024-03-01", payee="Employer", memo="March pay"),
        make_tx("chk", -120000, "2024-03-02", payee="Landlord"),
        make_tx("chk", -8000, "2024-03-05", payee="Utility Co"),
        make_tx("visa", -3500, "2024-02-20", payee="Gym"),
    ])
    transactions = list(snapshot.transactions)
    for i, name in ((1, "Rent"), (2, "Power, Water"), (3, "Gym")):
        transactions[i] = transactions[i].model_copy(update={"category_name": name})
    transactions[1] = transactions[1].model_copy(update={
        "flag_color": FlagColor.PURPLE, "cleared": "reconciled",
    })
    return snapshot.model_copy(update={
        "transactions": transactions,
        "category_groups": GROUPS,
    })


class TestParseSince:
    """Tests for the start date filter."""

    def test_empty(self):
        """Test that no value means no filter."""
        assert parse_since(None) is None
        assert parse_since("") is None

    @pytest.mark.parametrize("value", [
        "2024-03-02",
        "2024-03-02T00:00:00Z",
        "2024-03-02T23:30:00-07:00",
    ])
    def test_formats(self, value):
        """Test plain dates and timestamps, keeping the written date."""
        assert parse_since(value) == date(2024, 3, 2)

    def test_unparseable(self):
        """Test a value that isn't a date."""
        with pytest.raises(PeriodError, match="start date"):
            parse_since("March 2nd")


class TestCategoryGroupMap:
    """Tests for mapping categories to their groups."""

    def test_hidden_groups_skipped(self):
        """Test that categories of hidden groups get no group."""
        assert category_group_map(GROUPS) == {
            "Rent": "Bills",
            "Power, Water": "Bills",
        }


class TestExportRows:
    """Tests for selecting and shaping rows."""

    def test_all_rows_in_ledger_order(self, export_snapshot):
        """Test that rows keep the ledger's order and fields."""
        rows = export_rows(export_snapshot)

        assert [r.payee_name for r in rows] == ["Employer", "Landlord", "Utility Co", "Gym"]
        rent = rows[1]
        assert rent.category_group == "Bills"
        assert rent.category_path == "Bills: Rent"
        assert rent.flag_color is FlagColor.PURPLE
        assert rent.cleared == "reconciled"
        assert rows[0].memo == "March pay"

    def test_since(self, export_snapshot):
        """Test that the start date is inclusive."""
        rows = export_rows(export_snapshot, since=date(2024, 3, 2))
        assert [r.payee_name for r in rows] == ["Landlord", "Utility Co"]

    def test_category_name(self, export_snapshot):
        """Test filtering by category name."""
        rows = export_rows(export_snapshot, category="Rent")
        assert [r.payee_name for r in rows] == ["Landlord"]

    def test_category_group(self, export_snapshot):
        """Test filtering by group name."""
        rows = export_rows(export_snapshot, category="Bills")
        assert [r.payee_name for r in rows] == ["Landlord", "Utility Co"]

    def test_hidden_category(self, export_snapshot):
        """Test that a category in a hidden group matches by name only."""
        assert [r.payee_name for r in export_rows(export_snapshot, category="Gym")] == ["Gym"]
        assert export_rows(export_snapshot, category="Old Stuff") == []
        gym = export_rows(export_snapshot, category="Gym")[0]
        assert gym.category_group == ""
        assert gym.category_path == ""


class TestWriteCsv:
    """Tests for the CSV writer."""

    def test_columns_and_amounts(self, export_snapshot):
        """Test the header, outflow/inflow split and quoting."""
        buffer = io.StringIO()
        count = write_csv(export_rows(export_snapshot), buffer)

        records = list(csv.reader(io.StringIO(buffer.getvalue())))
        assert count == 4
        assert tuple(records[0]) == EXPORT_COLUMNS
        assert records[1][8:10] == ["", "250.00"]
        assert records[2] == [
            "Checking", "purple", "2024-03-02", "Landlord", "Bills: Rent",
            "Bills", "Rent", "", "120.00", "", "reconciled",
        ]
        assert records[3][6] == "Power, Water"
        assert '"Power, Water"' in buffer.getvalue()

    def test_zero_amount_is_inflow(self, make_tx, make_snapshot):
        """Test that a zero amount is written as a zero inflow."""
        text = render_csv(export_rows(make_snapshot([make_tx("chk", 0, "2024-01-01")])))
        assert text.splitlines()[1].endswith(",,0.00,")

    def test_empty(self):
        """Test that an empty export still has a header."""
        assert render_csv([]) == ",".join(EXPORT_COLUMNS) + "\n"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
