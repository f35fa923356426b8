"""
Text Rendering

Turns report models into plain-text tables for the terminal and the
dashboard's raw view. Amounts are formatted from integer milliunits
without ever passing through a float.
"""

from typing import Sequence

from money_age.models.aging import (
    AgedSpend,
    AgeOfMoneyReport,
    ProjectedSpend,
    SpendingThreshold,
)
from money_age.models.flows import FlowEntry, FlowsReport

# Keep listing flows past the top ten only while they are at least this big.
FLOW_LISTING_FLOOR = 100_000


def _to_cents(milliunits: int) -> int:
    """Unsigned whole cents, rounded half away from zero."""
    cents, remainder = divmod(abs(milliunits), 10)
    if remainder >= 5:
        cents += 1
    return cents


def format_amount(milliunits: int, symbol: str = "$") -> str:
    """
    Format milliunits as currency, e.g. -1234567 -> "-$1,234.57".

    Rounds half away from zero to whole cents.
    """
    sign = "-" if milliunits < 0 else ""
    cents = _to_cents(milliunits)
    return f"{sign}{symbol}{cents // 100:,}.{cents % 100:02d}"


def format_decimal(milliunits: int) -> str:
    """Plain decimal for files, e.g. -1234567 -> "-1234.57"."""
    sign = "-" if milliunits < 0 else ""
    cents = _to_cents(milliunits)
    return f"{sign}{cents // 100}.{cents % 100:02d}"


def clean_payee(payee: str) -> str:
    """Tidy transfer payees: "Transfer : Savings" -> "Transfer: Savings"."""
    return payee.replace("Transfer :", "Transfer:")


def render_table(rows: Sequence[Sequence[str]]) -> str:
    """Left-align columns, separated by a single space."""
    if not rows:
        return ""
    widths = [0] * max(len(row) for row in rows)
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[i]) for i, cell in enumerate(row)]
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def _heading(title: str) -> str:
    return f"{title}\n{'=' * len(title)}"


def render_realized(spends: Sequence[AgedSpend], symbol: str = "$") -> str:
    return render_table([
        [
            f"{spend.age_in_days:3d}",
            f"Earned: {spend.earned_date.isoformat()}",
            f"Spent: {spend.spent_date.isoformat()}",
            format_amount(spend.amount, symbol),
            spend.account_name,
            clean_payee(spend.payee_name),
        ]
        for spend in spends
    ])


def render_thresholds(thresholds: Sequence[SpendingThreshold], symbol: str = "$") -> str:
    return render_table([
        [
            str(threshold.age_if_spent_today),
            threshold.bucket_date.isoformat(),
            format_amount(threshold.cumulative_amount, symbol),
            threshold.account_name,
            clean_payee(threshold.payee_name),
        ]
        for threshold in thresholds
    ])


def render_projected(projected: Sequence[ProjectedSpend], symbol: str = "$") -> str:
    rows = []
    for spend in projected:
        if spend.not_earned_yet:
            age, earned = "N/A", "Not earned yet."
        else:
            age, earned = str(spend.age_in_days), f"Earned: {spend.earned_date.isoformat()}"
        rows.append([
            age,
            earned,
            f"Spend on: {spend.spend_date.isoformat()}",
            format_amount(spend.amount, symbol),
            spend.account_name,
            clean_payee(spend.payee_name),
        ])
    return render_table(rows)


def render_age_of_money(report: AgeOfMoneyReport, symbol: str = "$") -> str:
    """Render the full age-of-money report."""
    sections = [
        render_realized(report.realized, symbol),
        _heading("Upcoming spending thresholds (and age if you spent today):"),
        render_thresholds(report.thresholds, symbol),
    ]
    if report.projected:
        sections.append(_heading("Projected age of scheduled transactions:"))
        sections.append(render_projected(report.projected, symbol))
    return "\n\n".join(section for section in sections if section) + "\n"


def _render_flow_list(entries: Sequence[FlowEntry], symbol: str) -> str:
    rows = []
    for count, entry in enumerate(entries, start=1):
        payee = clean_payee(entry.payee_name)
        rows.append([
            entry.date.isoformat(),
            format_amount(abs(entry.amount), symbol).rjust(10),
            format_amount(abs(entry.running_total), symbol).rjust(10),
            entry.account_name,
            f'"{payee}"' if entry.memo else payee,
            f'"{entry.memo}"' if entry.memo else "",
        ])
        if count > 10 and abs(entry.amount) < FLOW_LISTING_FLOOR:
            break
    return render_table(rows)


def render_flows(report: FlowsReport, symbol: str = "$") -> str:
    """Render the largest inflows/outflows report."""
    sections = []
    if report.period is not None:
        sections.append(f"{report.period.label} Balance: {format_amount(report.balance, symbol)}")
    sections.append(_heading(f"Inflows: {format_amount(report.inflow_total, symbol)}"))
    sections.append(_render_flow_list(report.inflows, symbol))
    sections.append(_heading(f"Outflows: {format_amount(-report.outflow_total, symbol)}"))
    sections.append(_render_flow_list(report.outflows, symbol))
    return "\n\n".join(section for section in sections if section) + "\n"
