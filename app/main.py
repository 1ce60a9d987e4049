"""
Streamlit Frontend for Expense Tracker

This is the user interface people use daily to record what they spend.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages in simple language
4. Visual feedback for all operations (one notification at a time)
5. No hidden actions

All state lives in the ExpenseTracker; this module only renders it
and forwards form input.
"""

from datetime import date
from decimal import Decimal

import streamlit as st

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.budget import NotificationSeverity
from expense_tracker.models.expense import SUGGESTED_CATEGORIES, ExpenseRecord
from expense_tracker.monitoring import format_money
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.services.storage import PersistenceError
from expense_tracker.validation import ExpenseValidationError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
</style>
""", unsafe_allow_html=True)


SYMBOL = get_settings().budget.currency_symbol

_NOTIFICATION_RENDERERS = {
    NotificationSeverity.INFO: st.success,
    NotificationSeverity.WARNING: st.warning,
    NotificationSeverity.CRITICAL: st.error,
    NotificationSeverity.DANGER: st.error,
}


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Get or create the tracker (cached for the server process)."""
    return create_app_components()


def money(amount: Decimal) -> str:
    return format_money(amount, SYMBOL)


def show_validation_errors(error: ExpenseValidationError):
    for issue in error.issues:
        if issue.severity == "error":
            st.error(issue.message)
            if issue.suggested_fix:
                st.caption(issue.suggested_fix)


def show_save_error(error: PersistenceError):
    st.error(
        f"Could not save to disk: {error}. "
        "Your change is kept for this session only."
    )


def render_notification(tracker: ExpenseTracker):
    """Render the single visible notification, with a dismiss button."""
    notification = tracker.notifications.current()
    if notification is None:
        return

    col1, col2 = st.columns([12, 1])
    with col1:
        _NOTIFICATION_RENDERERS[notification.severity](notification.message)
    with col2:
        if st.button("✖", key="dismiss_notification", help="Dismiss"):
            tracker.notifications.dismiss()
            st.rerun()


def main():
    """Main application entry point."""
    tracker = get_tracker()

    # Sidebar navigation
    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "📋 Expenses", "📊 Dashboard", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Add each expense as it happens
        2. Set a monthly budget
        3. Watch the dashboard for alerts
        """
    )

    render_notification(tracker)

    # Route to appropriate page
    if page == "➕ Add Expense":
        render_add_page(tracker)
    elif page == "📋 Expenses":
        render_expenses_page(tracker)
    elif page == "📊 Dashboard":
        render_dashboard_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def expense_form(key: str, record: ExpenseRecord | None = None) -> dict | None:
    """
    Render the add/edit form.

    Returns the raw form values when submitted, otherwise None.
    Values are passed on unvalidated; the tracker validates them.
    """
    categories = list(SUGGESTED_CATEGORIES)
    if record and record.category not in categories:
        categories.append(record.category)

    with st.form(key=key, clear_on_submit=record is None):
        col1, col2 = st.columns(2)

        with col1:
            name = st.text_input(
                "Name *",
                value=record.name if record else "",
                help="What did you spend on?",
            )
            amount = st.number_input(
                f"Amount ({SYMBOL}) *",
                value=float(record.amount) if record else 0.0,
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )

        with col2:
            category = st.selectbox(
                "Category *",
                options=categories,
                index=categories.index(record.category) if record else 0,
                format_func=lambda x: x.title(),
            )
            spent_on = st.date_input(
                "Date *",
                value=record.date if record else date.today(),
            )

        notes = st.text_area(
            "Notes (optional)",
            value=record.notes_text if record else "",
            placeholder="Add any notes about this expense...",
        )

        submitted = st.form_submit_button(
            "💾 Save Changes" if record else "➕ Add Expense",
            type="primary",
        )

    if not submitted:
        return None

    return {
        "name": name,
        "amount": f"{amount:.2f}",
        "category": category,
        "date": spent_on,
        "notes": notes,
    }


def render_add_page(tracker: ExpenseTracker):
    """Render the add expense page."""
    st.title("➕ Add Expense")
    st.markdown("Record a new expense.")

    raw = expense_form("add_expense")
    if raw is None:
        return

    try:
        tracker.add_expense(raw)
    except ExpenseValidationError as e:
        show_validation_errors(e)
    except PersistenceError as e:
        show_save_error(e)
    else:
        st.rerun()


def render_expenses_page(tracker: ExpenseTracker):
    """Render the searchable expense list with edit and delete."""
    st.title("📋 Your Expenses")

    # Filters
    col1, col2 = st.columns(2)

    with col1:
        search_term = st.text_input(
            "Search",
            placeholder="Name, notes or category",
        )

    with col2:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[""] + tracker.categories(),
            format_func=lambda x: "All Categories" if not x else x.title(),
        )

    expenses = tracker.list_expenses(search_term, category_filter)

    if not expenses:
        st.info("📋 No expenses found. Use the 'Add Expense' page to add one.")
        return

    st.dataframe(
        [
            {
                "Date": record.date.isoformat(),
                "Name": record.name,
                "Category": record.category,
                "Amount": money(record.amount),
                "Notes": record.notes_text,
            }
            for record in expenses
        ],
        use_container_width=True,
        hide_index=True,
    )

    st.markdown("---")
    selected = st.selectbox(
        "Select an expense",
        options=expenses,
        format_func=lambda r: f"{r.date.isoformat()} · {r.name} · {money(r.amount)}",
    )

    edit_tab, delete_tab = st.tabs(["✏️ Edit", "🗑️ Delete"])

    with edit_tab:
        raw = expense_form(f"edit_{selected.id}", selected)
        if raw is not None:
            try:
                tracker.edit_expense(selected.id, raw)
            except ExpenseValidationError as e:
                show_validation_errors(e)
            except PersistenceError as e:
                show_save_error(e)
            else:
                st.rerun()

    with delete_tab:
        st.markdown(f"**{selected.name}** · {money(selected.amount)} · {selected.date.isoformat()}")
        confirmed = st.checkbox(
            "Yes, delete this expense permanently",
            key=f"confirm_delete_{selected.id}",
        )
        if st.button("🗑️ Delete Expense", disabled=not confirmed):
            try:
                tracker.delete_expense(selected.id, confirm=lambda record: confirmed)
            except PersistenceError as e:
                show_save_error(e)
            else:
                st.rerun()


def render_dashboard_page(tracker: ExpenseTracker):
    """Render the budget summary, trend and category breakdown."""
    st.title("📊 Dashboard")

    summary = tracker.summary()

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Spent this month", money(summary.total_spent))
    with col2:
        st.metric("Monthly budget", money(summary.monthly_limit))
    with col3:
        st.metric("Remaining", money(summary.remaining))

    st.progress(
        float(summary.progress_percentage) / 100,
        text=f"{summary.percentage_used.quantize(Decimal('1'))}% of budget used",
    )

    alert = tracker.last_alert
    if alert and alert.should_notify:
        _NOTIFICATION_RENDERERS[alert.severity](alert.message)

    st.markdown("---")
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("📈 Monthly Trend")
        trend = tracker.monthly_trend()
        st.line_chart(
            {
                "Month": [f"{point.year}-{point.month:02d}" for point in trend],
                "Spent": [float(point.total) for point in trend],
            },
            x="Month",
            y="Spent",
        )

    with col2:
        st.subheader("🧾 This Month by Category")
        breakdown = tracker.current_breakdown()
        if breakdown.totals:
            st.bar_chart(
                {
                    "Category": list(breakdown.totals),
                    "Spent": [float(total) for total in breakdown.totals.values()],
                },
                x="Category",
                y="Spent",
            )
        else:
            st.info("No expenses recorded this month yet.")

    st.markdown("---")
    st.subheader("📤 Export")

    if st.button("Prepare CSV"):
        st.session_state.csv_export = tracker.export()
        st.rerun()

    export = st.session_state.get("csv_export")
    if export is not None:
        st.download_button(
            f"⬇️ Download {export.filename} ({export.row_count} expenses)",
            data=export.content,
            file_name=export.filename,
            mime=export.mime_type,
        )


def render_settings_page(tracker: ExpenseTracker):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Monthly Budget")
    with st.form(key="budget_form"):
        new_limit = st.number_input(
            f"Monthly budget ({SYMBOL})",
            value=float(tracker.ledger.monthly_limit),
            min_value=0.0,
            step=100.0,
            format="%.2f",
        )
        submitted = st.form_submit_button("💾 Save Budget", type="primary")

    if submitted:
        try:
            tracker.set_budget(f"{new_limit:.2f}")
        except ExpenseValidationError as e:
            show_validation_errors(e)
        except PersistenceError as e:
            show_save_error(e)
        else:
            st.rerun()

    st.markdown("---")
    st.markdown("### Configuration")

    status = validate_all_settings()
    for name in ("storage", "budget", "notifications", "app"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings OK")
        else:
            st.error(f"❌ {name.title()} settings - {status.get(f'{name}_error')}")

    st.markdown(
        f"Expenses are stored in `{get_settings().storage.data_file}`. "
        "To change defaults, create a `.env` file; see `.env.example`."
    )


if __name__ == "__main__":
    main()
