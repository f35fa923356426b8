"""
Streamlit Dashboard for Age of Money

Shows how long money sits in a budget before it is spent, reading a
budget exported from YNAB to a directory of JSON files.

DESIGN PRINCIPLES:
1. The same flows the tests exercise, nothing computed in the UI
2. Inconsistent ledgers are reported, never half-rendered
3. "Not earned yet" is shown as a result, not as an error

Pages:
- Age of Money: realized ages, spending thresholds, scheduled projections
- Largest Flows: biggest inflows and outflows of net worth
- Export: transactions as CSV, filtered by start date and category
- Settings: configuration status and this session's audit events
"""

import asyncio
from datetime import datetime, timezone

import streamlit as st

from money_age.audit import create_correlation_id
from money_age.config import get_settings, validate_all_settings
from money_age.errors import (
    AgeOfMoneyError,
    DataInconsistencyError,
    LedgerSourceError,
    NoIncomeError,
    PeriodError,
)
from money_age.orchestrator import (
    AgeOfMoneyFlow,
    ExportFlow,
    FlowsReportFlow,
    create_app_components,
)
from money_age.reports.formatting import clean_payee, format_amount


# Page configuration
st.set_page_config(
    page_title="Age of Money",
    page_icon="⏳",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components(data_dir: str):
    """Get or create application components (cached per data directory)."""
    return create_app_components(data_dir=data_dir)


def main():
    """Main application entry point."""
    settings = get_settings()

    st.sidebar.title("⏳ Age of Money")
    st.sidebar.markdown("---")

    data_dir = st.sidebar.text_input(
        "Ledger directory",
        value=settings.ledger.data_dir,
        help="Directory holding budgets.json, accounts.json, transactions.json",
    )
    budget_name = st.sidebar.text_input(
        "Budget name",
        value=settings.ledger.budget_name or "",
        help="Leave empty when the export holds a single budget",
    ) or None

    age_flow, flows_flow, export_flow, audit_logger = get_components(data_dir)

    if st.sidebar.button("🔄 Reload files"):
        get_components.clear()
        st.rerun()

    page = st.sidebar.radio(
        "Navigate to:",
        ["⏳ Age of Money", "📈 Largest Flows", "📤 Export", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Age of money** is how many days passed between earning
        a dollar and spending it, oldest money spent first.
        """
    )

    symbol = settings.app.currency_symbol
    try:
        if page == "⏳ Age of Money":
            render_age_page(age_flow, budget_name, symbol)
        elif page == "📈 Largest Flows":
            render_flows_page(flows_flow, budget_name, symbol)
        elif page == "📤 Export":
            render_export_page(export_flow, budget_name)
        elif page == "⚙️ Settings":
            render_settings_page(audit_logger)
    except Exception as e:
        audit_logger.log_error(
            error_type=type(e).__name__,
            error_message=str(e),
            details={"page": page},
        )
        st.error(f"❌ Something went wrong: {e}")


def render_age_page(age_flow: AgeOfMoneyFlow, budget_name, symbol: str):
    """Render the age of money page."""
    st.title("⏳ Age of Money")

    include_income = st.checkbox(
        "Count scheduled income when projecting",
        value=get_settings().aging.include_scheduled_income,
    )

    try:
        report, validation = run_async(
            age_flow.run(
                budget_name=budget_name,
                now=datetime.now(timezone.utc),
                include_scheduled_income=include_income,
                correlation_id=create_correlation_id(),
            )
        )
    except LedgerSourceError as e:
        st.error(f"❌ Couldn't load the ledger: {e}")
        return
    except NoIncomeError as e:
        st.warning(f"⚠️ {e}")
        return
    except DataInconsistencyError as e:
        st.error(f"❌ The ledger is inconsistent: {e}")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        current = report.current_age
        st.metric("Current age", f"{current} days" if current is not None else "N/A")
    with col2:
        st.metric("Earned", format_amount(report.total_earned, symbol))
    with col3:
        st.metric("Unspent", format_amount(report.budget_difference, symbol))

    for warning in validation.warnings:
        st.caption(f"⚠️ {warning.message}")

    st.markdown("### Upcoming spending thresholds")
    st.caption("How much you could spend today, and how old that money would be.")
    st.dataframe(
        [
            {
                "Age if spent today": t.age_if_spent_today,
                "Earned": t.bucket_date.isoformat(),
                "Up to": format_amount(t.cumulative_amount, symbol),
                "Account": t.account_name,
                "Payee": clean_payee(t.payee_name),
            }
            for t in report.thresholds
        ],
        use_container_width=True,
    )

    st.markdown("### Scheduled transactions")
    not_earned = [p for p in report.projected if p.not_earned_yet]
    if not_earned:
        st.info(
            f"💡 {format_amount(not_earned[0].amount, symbol)} due "
            f"{not_earned[0].spend_date.isoformat()} isn't covered by money earned yet."
        )
    st.dataframe(
        [
            {
                "Age": "N/A" if p.not_earned_yet else p.age_in_days,
                "Earned": p.earned_date.isoformat() if p.earned_date else "Not earned yet.",
                "Due": p.spend_date.isoformat(),
                "Amount": format_amount(-p.amount, symbol),
                "Account": p.account_name,
                "Payee": clean_payee(p.payee_name),
            }
            for p in report.projected
        ],
        use_container_width=True,
    )

    with st.expander(f"Realized spending ({len(report.realized)})"):
        st.dataframe(
            [
                {
                    "Age": s.age_in_days,
                    "Earned": s.earned_date.isoformat(),
                    "Spent": s.spent_date.isoformat(),
                    "Amount": format_amount(-s.amount, symbol),
                    "Account": s.account_name,
                    "Payee": clean_payee(s.payee_name),
                }
                for s in reversed(report.realized)
            ],
            use_container_width=True,
        )


def render_flows_page(flows_flow: FlowsReportFlow, budget_name, symbol: str):
    """Render the largest flows page."""
    st.title("📈 Largest Flows")
    st.markdown("Where net worth came from and where it went.")

    col1, col2, col3 = st.columns(3)
    with col1:
        month = st.text_input("Month", placeholder="e.g. Mar 2024") or None
    with col2:
        year = st.text_input("Year", placeholder="e.g. 2024") or None
    with col3:
        exclude = st.text_input(
            "Exclude accounts",
            help="Comma-separated account names",
        )
    exclude_accounts = [name.strip() for name in exclude.split(",") if name.strip()]

    try:
        report = run_async(
            flows_flow.run(
                budget_name=budget_name,
                month=month,
                year=year,
                exclude_accounts=exclude_accounts,
            )
        )
    except PeriodError as e:
        st.warning(f"⚠️ {e}")
        return
    except LedgerSourceError as e:
        st.error(f"❌ Couldn't load the ledger: {e}")
        return
    except AgeOfMoneyError as e:
        st.error(f"❌ {e}")
        return

    if report.period:
        st.markdown(f"**{report.period.label}**")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Inflows", format_amount(report.inflow_total, symbol))
    with col2:
        st.metric("Outflows", format_amount(report.outflow_total, symbol))
    with col3:
        st.metric("Balance", format_amount(report.balance, symbol))

    for title, entries in (("Inflows", report.inflows), ("Outflows", report.outflows)):
        st.markdown(f"### {title}")
        st.dataframe(
            [
                {
                    "Date": e.date.isoformat(),
                    "Amount": format_amount(e.amount, symbol),
                    "Running total": format_amount(e.running_total, symbol),
                    "Account": e.account_name,
                    "Payee": clean_payee(e.payee_name),
                    "Memo": e.memo,
                }
                for e in entries
            ],
            use_container_width=True,
        )


def render_export_page(export_flow: ExportFlow, budget_name):
    """Render the transaction export page."""
    st.title("📤 Export Transactions")
    st.markdown("Download transactions as CSV, one row per transaction.")

    col1, col2 = st.columns(2)
    with col1:
        since = st.text_input(
            "Start date",
            placeholder="e.g. 2024-01-01",
            help="Only transactions on or after this date",
        ) or None
    with col2:
        category = st.text_input(
            "Category",
            help="A category or category group name",
        ) or None

    try:
        content = run_async(
            export_flow.run(
                budget_name=budget_name,
                since=since,
                category=category,
            )
        )
    except PeriodError as e:
        st.warning(f"⚠️ {e}")
        return
    except LedgerSourceError as e:
        st.error(f"❌ Couldn't load the ledger: {e}")
        return

    st.download_button(
        "⬇️ Download CSV",
        data=content,
        file_name="transactions.csv",
        mime="text/csv",
    )
    with st.expander("Preview"):
        st.code("\n".join(content.splitlines()[:21]), language=None)


def render_settings_page(audit_logger):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()
    sections = [
        ("Ledger source", "ledger"),
        ("Aging", "aging"),
        ("Application", "app"),
    ]
    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Recent Activity")
    events = audit_logger.events[-50:]
    if not events:
        st.info("No activity yet in this session.")
    else:
        st.dataframe(
            [
                {
                    "Time": event.timestamp.isoformat(timespec="seconds"),
                    "Event": event.event_type.value,
                    "Severity": event.severity.value,
                    "Description": event.description,
                }
                for event in reversed(events)
            ],
            use_container_width=True,
        )

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Settings are read from the environment or a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
