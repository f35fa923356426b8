"""
Transaction Export

Writes a budget's transactions as CSV, one row per transaction, in
the column layout of the budgeting app's own register export.

Filters:
- since: only transactions on or after a date
- category: a category name, or a category group name

Categories in hidden groups keep their name but get no group, so
they can only be matched by category name.
"""

import csv
import io
from datetime import date, datetime
from typing import Iterable, Optional, TextIO

from money_age.errors import PeriodError
from money_age.models.export import ExportRow
from money_age.models.ledger import CategoryGroup, LedgerSnapshot
from money_age.reports.formatting import format_decimal

EXPORT_COLUMNS = (
    "Account",
    "Flag",
    "Date",
    "Payee",
    "Category Group/Category",
    "Category Group",
    "Category",
    "Memo",
    "Outflow",
    "Inflow",
    "Cleared",
)


def parse_since(value: Optional[str]) -> Optional[date]:
    """
    Parse a start date such as "2024-03-01" or "2024-03-01T00:00:00Z".

    A timestamp keeps the calendar date it was written with.

    Raises:
        PeriodError: If the value can't be parsed
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise PeriodError(f"could not parse start date {value!r}") from None


def category_group_map(groups: Iterable[CategoryGroup]) -> dict[str, str]:
    """Category name -> group name, skipping hidden groups."""
    mapping = {}
    for group in groups:
        if group.hidden:
            continue
        for category in group.categories:
            mapping[category.name] = group.name
    return mapping


def export_rows(
    snapshot: LedgerSnapshot,
    since: Optional[date] = None,
    category: Optional[str] = None,
) -> list[ExportRow]:
    """
    Select and shape the transactions to export, in ledger order.

    `category` matches either the transaction's category or its group.
    """
    groups = category_group_map(snapshot.category_groups)
    rows = []
    for tx in snapshot.transactions:
        if since is not None and tx.date < since:
            continue
        group = groups.get(tx.category_name, "")
        if category and category not in (tx.category_name, group):
            continue
        rows.append(ExportRow(
            account_name=tx.account_name,
            flag_color=tx.flag_color,
            date=tx.date,
            payee_name=tx.payee_name,
            category_group=group,
            category_name=tx.category_name,
            memo=tx.memo,
            amount=tx.amount,
            cleared=tx.cleared,
        ))
    return rows


def _csv_fields(row: ExportRow) -> list[str]:
    outflow = format_decimal(-row.amount) if row.amount < 0 else ""
    inflow = format_decimal(row.amount) if row.amount >= 0 else ""
    return [
        row.account_name,
        row.flag_color.value if row.flag_color else "",
        row.date.isoformat(),
        row.payee_name,
        row.category_path,
        row.category_group,
        row.category_name,
        row.memo,
        outflow,
        inflow,
        row.cleared,
    ]


def write_csv(rows: Iterable[ExportRow], stream: TextIO) -> int:
    """
    Write the header and one line per row to `stream`.

    Returns:
        Number of rows written, excluding the header
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    count = 0
    for row in rows:
        writer.writerow(_csv_fields(row))
        count += 1
    return count


def render_csv(rows: Iterable[ExportRow]) -> str:
    """The export as a string."""
    buffer = io.StringIO()
    write_csv(rows, buffer)
    return buffer.getvalue()
