"""
Streamlit Frontend for Kameti Ledger

The treasurer's single-page ledger: dashboard, transaction table,
member roster and the session's audit trail.

DESIGN PRINCIPLES:
1. Every number comes from LedgerSession.view(), recomputed on each rerun
2. Destructive actions need an explicit second click
3. Empty states instead of error messages
4. The insights panel never blocks or breaks the page
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional

import streamlit as st

from src.config import get_settings, validate_all_settings
from src.models import (
    DESCRIPTION_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    MONTH_NAMES,
    NAME_MAX_LENGTH,
    AuditAction,
    PeriodView,
    TransactionCategory,
    TransactionType,
)
from src.orchestrator import LedgerSession, View, create_app_components
from src.services import StorageError


ALL_YEAR = "All Year"

DARK_CSS = """
<style>
    .stApp { background-color: #020617; color: #f1f5f9; }
    section[data-testid="stSidebar"] { background-color: #0f172a; }
</style>
"""

AUDIT_ICONS = {
    AuditAction.CREATE: "🟢",
    AuditAction.UPDATE: "🔵",
    AuditAction.DELETE: "🔴",
}

SERVICES = [
    ("Gemini (Insights)", "gemini"),
    ("Ledger settings", "ledger"),
    ("App settings", "app"),
]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def format_money(amount: Decimal, currency: str) -> str:
    """'Rs. 1,500' for whole amounts, 'Rs. 1,500.50' otherwise."""
    if amount == amount.to_integral_value():
        return f"{currency} {amount:,.0f}"
    return f"{currency} {amount:,.2f}"


def chart_data(view: PeriodView) -> dict[str, list]:
    """Monthly series in the column layout st.bar_chart expects."""
    return {
        "month": [bucket.label for bucket in view.monthly],
        "In": [float(bucket.income) for bucket in view.monthly],
        "Out": [float(bucket.expense) for bucket in view.monthly],
    }


def transaction_rows(session: LedgerSession, view: PeriodView, currency: str) -> list[dict]:
    """Ledger table rows for the filtered transactions."""
    rows = []
    for transaction in view.transactions:
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        rows.append({
            "Date": transaction.date.isoformat(),
            "Description": transaction.description,
            "From": session.member_name(transaction.member_id) or "",
            "Category": transaction.category.value,
            "Type": transaction.type.value,
            "Amount": f"{sign}{format_money(transaction.amount, currency)}",
        })
    return rows


def month_options() -> list[str]:
    return [ALL_YEAR] + list(MONTH_NAMES)


def month_from_label(label: str) -> Optional[int]:
    if label == ALL_YEAR:
        return None
    return MONTH_NAMES.index(label) + 1


def get_session() -> LedgerSession:
    """One session per browser tab, created on first use."""
    if "ledger_session" not in st.session_state:
        st.session_state.ledger_session = create_app_components()
    return st.session_state.ledger_session


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="Kameti Ledger",
        page_icon="📒",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    session = get_session()
    ledger_settings = get_settings().ledger
    currency = ledger_settings.currency_symbol

    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None
    if "pending_delete" not in st.session_state:
        st.session_state.pending_delete = None

    if session.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    render_sidebar(session, ledger_settings.organization_name, currency)
    render_header(session)

    if st.session_state.editing_id:
        render_transaction_form(session)

    view = session.view()
    if session.active_view == View.DASHBOARD:
        render_dashboard(session, view, currency, ledger_settings.top_contributors)
    elif session.active_view == View.TRANSACTIONS:
        render_ledger_page(session, view, currency)
    elif session.active_view == View.MEMBERS:
        render_members_page(session, view, currency)
    elif session.active_view == View.AUDIT:
        render_audit_page(session)


def render_sidebar(session: LedgerSession, organization: str, currency: str):
    """Navigation, dark-mode toggle and the all-time wallet balance."""
    st.sidebar.title(f"📒 {organization}")

    if st.sidebar.toggle("🌙 Dark mode", value=session.dark_mode) != session.dark_mode:
        try:
            session.toggle_dark_mode()
        except StorageError as e:
            st.sidebar.error(f"Could not save preference: {e}")
        st.rerun()

    st.sidebar.markdown("---")
    for target in View:
        st.sidebar.button(
            target.value,
            key=f"nav_{target.name}",
            type="primary" if session.active_view == target else "secondary",
            use_container_width=True,
            on_click=session.navigate,
            args=(target,),
        )

    st.sidebar.markdown("---")
    st.sidebar.metric("Total Wallet", format_money(session.view().all_time_balance, currency))

    st.sidebar.markdown("---")
    render_connection_status(validate_all_settings())


def render_connection_status(status: dict):
    """One line per settings section, with the first line of any error."""
    st.sidebar.markdown("#### Connection Status")
    for name, key in SERVICES:
        if status.get(key, False):
            st.sidebar.caption(f"✅ {name}")
        else:
            error = (str(status.get(f"{key}_error", "")).splitlines() or ["Not configured"])[0]
            st.sidebar.caption(f"❌ {name} - {error}")


def render_header(session: LedgerSession):
    """Page title, period subtitle, year dropdown and month ribbon."""
    st.title(session.active_view.value)
    st.caption(session.period_description)

    col1, col2 = st.columns([1, 5])
    with col1:
        years = session.year_options()
        year = st.selectbox("Year", options=years, index=years.index(session.period.year))
        if year != session.period.year:
            session.select_year(year)

    with col2:
        options = month_options()
        current = ALL_YEAR if session.period.month is None else MONTH_NAMES[session.period.month - 1]
        label = st.radio(
            "Month",
            options=options,
            index=options.index(current),
            horizontal=True,
            label_visibility="collapsed",
        )
        month = month_from_label(label)
        if month != session.period.month:
            session.select_month(month)

    if st.button("➕ New Entry", type="primary"):
        st.session_state.editing_id = "__new__"


def render_transaction_form(session: LedgerSession):
    """Create/edit form. Member selection only applies to income entries."""
    editing_id = st.session_state.editing_id
    existing = None if editing_id == "__new__" else session.store.get_transaction(editing_id)

    st.subheader("Edit Transaction" if existing else "New Transaction")

    types = list(TransactionType)
    entry_type = st.radio(
        "Entry Type",
        options=types,
        index=types.index(existing.type) if existing else 0,
        format_func=lambda t: t.value.title(),
        horizontal=True,
    )

    members = list(session.store.members)
    member_options = [""] + [member.id for member in members]

    with st.form("transaction_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input(
                "Amount *",
                min_value=0.0,
                value=float(existing.amount) if existing else 0.0,
                step=100.0,
            )
            entry_date = st.date_input("Date *", value=existing.date if existing else date.today())
        with col2:
            categories = list(TransactionCategory)
            category = st.selectbox(
                "Category",
                options=categories,
                index=categories.index(existing.category) if existing else 0,
                format_func=lambda c: c.value,
            )
            member_id = ""
            if entry_type == TransactionType.INCOME:
                current = existing.member_id if existing and existing.member_id in member_options else ""
                member_id = st.selectbox(
                    "Member (optional)",
                    options=member_options,
                    index=member_options.index(current),
                    format_func=lambda m: session.member_name(m) or "Select member...",
                )

        description = st.text_input(
            "Description *",
            value=existing.description if existing else "",
            max_chars=DESCRIPTION_MAX_LENGTH,
        )

        submitted = st.form_submit_button("Save Entry", type="primary")
        cancelled = st.form_submit_button("Cancel")

    if cancelled:
        st.session_state.editing_id = None
        st.rerun()

    if submitted:
        result, saved = session.save_transaction({
            "id": None if editing_id == "__new__" else editing_id,
            "date": entry_date,
            "type": entry_type,
            "amount": amount,
            "description": description,
            "category": category,
            "member_id": member_id,
        })
        for issue in result.errors:
            st.error(issue.message)
        for issue in result.warnings:
            st.warning(issue.message)
        if result.is_valid:
            st.session_state.editing_id = None
            st.rerun()


def render_dashboard(session: LedgerSession, view: PeriodView, currency: str, top: int):
    """Stat cards, annual cash flow chart, insights and top contributors."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Period Income", format_money(view.totals.income, currency))
    col2.metric("Period Expense", format_money(view.totals.expense, currency))
    col3.metric("Net Balance", format_money(view.totals.balance, currency))

    st.subheader(f"Annual Cash Flow - {view.period.year}")
    st.bar_chart(chart_data(view), x="month", y=["In", "Out"], color=["#10b981", "#f43f5e"])

    left, right = st.columns(2)
    with right:
        st.markdown("#### Top Contributors")
        if not view.contributions:
            st.caption("No members added yet.")
        for contribution in view.top_contributors(top):
            st.markdown(
                f"**{contribution.member.name}** · {format_money(contribution.total, currency)}"
            )
            st.progress(min(contribution.share, 100.0) / 100.0)

    with left:
        st.markdown("#### ✨ Smart Insights")
        if session.insights_stale:
            with st.spinner(session.insights_text):
                run_async(session.refresh_insights())
        st.info(f"\"{session.insights_text}\"")


def render_ledger_page(session: LedgerSession, view: PeriodView, currency: str):
    """Searchable transaction table with edit and two-step delete."""

    col1, col2 = st.columns([3, 1])
    with col1:
        term = st.text_input("Search", value=session.search_term, placeholder="Search records...")
        if term != session.search_term:
            session.set_search(term)
            view = session.view()
    with col2:
        st.caption(f"{len(view.transactions)} items listed")

    if not view.transactions:
        st.info("No records found for this selection.")
        return

    st.dataframe(transaction_rows(session, view, currency), use_container_width=True, hide_index=True)

    for transaction in view.transactions:
        c1, c2, c3 = st.columns([6, 1, 1])
        c1.markdown(f"{transaction.date.isoformat()} · {transaction.description}")
        if c2.button("Edit", key=f"edit_{transaction.id}"):
            st.session_state.editing_id = transaction.id
            st.rerun()
        if c3.button("Delete", key=f"delete_{transaction.id}"):
            st.session_state.pending_delete = transaction.id

        if st.session_state.pending_delete == transaction.id:
            st.warning("Are you sure you want to delete this transaction?")
            yes, no = st.columns(2)
            confirmed = yes.button("Yes, delete", key=f"confirm_{transaction.id}", type="primary")
            declined = no.button("Cancel", key=f"cancel_{transaction.id}")
            if confirmed or declined:
                session.delete_transaction(transaction.id, confirm=lambda _tx: confirmed)
                st.session_state.pending_delete = None
                st.rerun()


def render_members_page(session: LedgerSession, view: PeriodView, currency: str):
    """Member cards with all-time contributions and the add-member form."""
    with st.expander("➕ Add Member"):
        with st.form("member_form", clear_on_submit=True):
            name = st.text_input("Enter member name:", max_chars=NAME_MAX_LENGTH)
            email = st.text_input("Enter member email:", max_chars=EMAIL_MAX_LENGTH)
            if st.form_submit_button("Add Member", type="primary"):
                if session.add_member(name, email) is None:
                    st.warning("Both name and email are needed to add a member.")
                else:
                    st.rerun()

    if not session.store.members:
        st.info("No members in the database yet.")
        return

    columns = st.columns(3)
    for index, contribution in enumerate(view.contributions):
        member = contribution.member
        with columns[index % 3]:
            with st.container(border=True):
                st.markdown(f"### {member.initial}  {member.name}")
                st.caption(f"{member.email} · {member.status.value}")
                st.metric("Total Contributed", format_money(contribution.total, currency))
                st.caption(f"Joined {member.join_date.isoformat()}")


def render_audit_page(session: LedgerSession):
    """Newest-first activity feed for this session."""
    records = session.store.audit_log
    if not records:
        st.info("No activity recorded for the current session.")
        return

    for record in records:
        icon = AUDIT_ICONS.get(record.action, "⚪")
        st.markdown(f"{icon} **{record.details}**")
        st.caption(
            f"{record.entity.value} • {record.timestamp.strftime('%Y-%m-%d')} "
            f"{record.timestamp.strftime('%H:%M:%S')}"
        )


if __name__ == "__main__":
    main()
