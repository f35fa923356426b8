"""Reports package: net worth flows, transaction export and text rendering."""

from money_age.reports.export import (
    EXPORT_COLUMNS,
    category_group_map,
    export_rows,
    parse_since,
    render_csv,
    write_csv,
)
from money_age.reports.flows import largest_flows, parse_period
from money_age.reports.formatting import (
    clean_payee,
    format_amount,
    format_decimal,
    render_age_of_money,
    render_flows,
    render_projected,
    render_realized,
    render_table,
    render_thresholds,
)

__all__ = [
    "EXPORT_COLUMNS",
    "category_group_map",
    "clean_payee",
    "export_rows",
    "format_amount",
    "format_decimal",
    "largest_flows",
    "parse_period",
    "parse_since",
    "render_age_of_money",
    "render_csv",
    "render_flows",
    "render_projected",
    "render_realized",
    "render_table",
    "render_thresholds",
    "write_csv",
]
