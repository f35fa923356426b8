"""
Largest Inflows and Outflows

Finds the biggest movements of net worth: income or spending that
enters or leaves ANY account, budget or tracking. Transfers between
your own accounts cancel out and are skipped, with one exception:
credit card spending is counted when the card is paid, not when the
purchase happens.

Classification uses the net-worth policy (Policy B) from
money_age.classification.policy.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from money_age.classification.policy import NET_WORTH_POLICY, MovementKind, classify
from money_age.errors import PeriodError
from money_age.models.flows import FlowEntry, FlowsReport, ReportPeriod
from money_age.models.ledger import LedgerSnapshot, Transaction

MONTH_FORMATS = ("%b %Y", "%B %Y")


def _parse_month(value: str) -> date:
    for fmt in MONTH_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    raise PeriodError(f"could not parse month as month: {value!r} (use e.g. 'Aug 2019')")


def parse_period(
    month: Optional[str] = None,
    year: Optional[str] = None,
) -> Optional[ReportPeriod]:
    """
    Build a report period from a month ("Aug 2019", "August 2019")
    or a year ("2019"). Returns None when neither is given.

    Raises:
        PeriodError: If both are given or the value can't be parsed
    """
    if month and year:
        raise PeriodError("can't specify both a month and a year")

    if month:
        start = _parse_month(month)
        if start.month == 12:
            end = date(start.year + 1, 1, 1)
        else:
            end = date(start.year, start.month + 1, 1)
        return ReportPeriod(label=start.strftime("%B %Y"), start=start, end=end)

    if year:
        try:
            start = datetime.strptime(year.strip(), "%Y").date()
        except ValueError:
            raise PeriodError(f"could not parse year: {year!r}") from None
        return ReportPeriod(label=str(start.year), start=start, end=date(start.year + 1, 1, 1))

    return None


def _running(transactions: Iterable[Transaction]) -> list[FlowEntry]:
    entries = []
    total = 0
    for tx in transactions:
        total += tx.amount
        entries.append(FlowEntry(
            date=tx.date,
            amount=tx.amount,
            running_total=total,
            account_name=tx.account_name,
            payee_name=tx.payee_name,
            memo=tx.memo,
        ))
    return entries


def largest_flows(
    snapshot: LedgerSnapshot,
    period: Optional[ReportPeriod] = None,
    exclude_accounts: Iterable[str] = (),
) -> FlowsReport:
    """
    Rank the inflows and outflows of net worth.

    Args:
        snapshot: The loaded ledger
        period: Only count transactions inside this period
        exclude_accounts: Account names to leave out entirely

    Raises:
        UnknownAccountError: If a counted transaction references
            an unknown account
    """
    accounts = snapshot.account_map
    excluded = {name for name in exclude_accounts if name}

    inflows: list[Transaction] = []
    outflows: list[Transaction] = []
    for tx in snapshot.transactions:
        if tx.account_name in excluded or tx.amount == 0:
            continue
        if period is not None and not period.contains(tx.date):
            continue
        classified = classify(tx, accounts, NET_WORTH_POLICY)
        if classified.kind is MovementKind.INCOME:
            inflows.append(tx)
        elif classified.kind is MovementKind.OUTFLOW:
            outflows.append(tx)

    inflows.sort(key=lambda tx: tx.amount, reverse=True)
    outflows.sort(key=lambda tx: tx.amount)

    return FlowsReport(
        period=period,
        inflows=_running(inflows),
        outflows=_running(outflows),
    )
