"""
Streamlit Frontend for Expense Tracker

A single page: header, theme toggle, add-expense form, and the expense
list with inline editing and the running total.

DESIGN PRINCIPLES:
1. Widgets only collect input; all state changes go through the stores
2. Widget callbacks run before the rerun, so the page always renders
   the state after the action
3. Each browser session owns its own component set
"""

import streamlit as st

from src.config import validate_all_settings
from src.models.expense import Expense
from src.orchestrator import AppComponents, create_app_components
from src.stores import ExpenseStore, use_theme
from src.views import (
    EMPTY_STATE_MESSAGE,
    EditSession,
    ExpenseForm,
    format_amount,
    theme_root_markup,
    visible_total,
)


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="centered",
)

ADD_FIELDS = ("add_description", "add_amount", "add_category")


def get_components() -> AppComponents:
    """Get or create this session's components."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components(
            use_storage=True,
            scope=st.session_state,
        )
    return st.session_state.components


# -----------------------------------------------------------------------------
# Callbacks
# -----------------------------------------------------------------------------

def on_add_submitted(form: ExpenseForm, store: ExpenseStore) -> None:
    form.update(
        description=st.session_state.add_description,
        amount=st.session_state.add_amount,
        category=st.session_state.add_category,
    )
    if form.submit(store) is not None:
        for key in ADD_FIELDS:
            st.session_state[key] = ""


def on_edit_clicked(session: EditSession, expense: Expense) -> None:
    session.begin(expense)
    st.session_state[f"edit_description_{expense.id}"] = session.draft.description
    st.session_state[f"edit_amount_{expense.id}"] = session.draft.amount
    st.session_state[f"edit_category_{expense.id}"] = session.draft.category


def on_edit_saved(session: EditSession, store: ExpenseStore, expense_id: int) -> None:
    session.update(
        description=st.session_state[f"edit_description_{expense_id}"],
        amount=st.session_state[f"edit_amount_{expense_id}"],
        category=st.session_state[f"edit_category_{expense_id}"],
    )
    session.save(store)


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def render_theme_toggle() -> None:
    theme = use_theme(st.session_state)
    st.markdown(theme_root_markup(theme.body_class), unsafe_allow_html=True)
    st.button(
        theme.toggle_icon,
        key="theme_toggle",
        help="Switch to light theme" if theme.is_dark else "Switch to dark theme",
        on_click=theme.toggle,
    )


def render_issues(result) -> None:
    if result is not None and not result.is_valid:
        for issue in result.issues:
            st.error(issue.message)


def render_add_form(form: ExpenseForm, store: ExpenseStore) -> None:
    with st.form("add_expense_form", clear_on_submit=False):
        st.text_input(
            "Description:",
            key="add_description",
            placeholder="Enter Description...",
        )
        st.text_input(
            "Amount:",
            key="add_amount",
            placeholder="Enter Amount...",
        )
        st.text_input(
            "Category:",
            key="add_category",
            placeholder="Enter Category...",
        )
        st.form_submit_button(
            "Add Expense",
            type="primary",
            use_container_width=True,
            on_click=on_add_submitted,
            args=(form, store),
        )
    render_issues(form.last_result)


def render_expense_row(
    expense: Expense,
    session: EditSession,
    store: ExpenseStore,
    currency_symbol: str,
) -> None:
    with st.container(border=True):
        if not session.is_editing(expense.id):
            st.markdown(f"**{expense.description}**")
            st.markdown(f"Amount: {format_amount(expense.amount, currency_symbol)}")
            st.markdown(f"Category: {expense.category}")
            st.caption(expense.date)

            col1, col2 = st.columns(2)
            with col1:
                st.button(
                    "Edit",
                    key=f"edit_{expense.id}",
                    on_click=on_edit_clicked,
                    args=(session, expense),
                )
            with col2:
                st.button(
                    "Delete",
                    key=f"delete_{expense.id}",
                    on_click=store.delete,
                    args=(expense.id,),
                )
            return

        with st.form(f"edit_form_{expense.id}"):
            st.text_input(
                "Description",
                key=f"edit_description_{expense.id}",
                placeholder="Edit Description...",
            )
            st.text_input(
                "Amount",
                key=f"edit_amount_{expense.id}",
                placeholder="Edit Amount...",
            )
            st.text_input(
                "Category",
                key=f"edit_category_{expense.id}",
                placeholder="Edit Category...",
            )
            col1, col2 = st.columns(2)
            with col1:
                st.form_submit_button(
                    "Save",
                    on_click=on_edit_saved,
                    args=(session, store, expense.id),
                )
            with col2:
                st.form_submit_button("Cancel", on_click=session.cancel)
        render_issues(session.last_result)


def render_expense_list(components: AppComponents) -> None:
    store = components.expense_store
    currency_symbol = components.settings.currency_symbol
    expenses = store.expenses

    if not expenses:
        st.info(EMPTY_STATE_MESSAGE)
        return

    for expense in expenses:
        render_expense_row(expense, components.edit_session, store, currency_symbol)

    total = visible_total(expenses, currency_symbol)
    if total is not None:
        st.markdown(
            f'<div class="total-container"><p><strong>Total: {total}</strong></p></div>',
            unsafe_allow_html=True,
        )


def render_settings(components: AppComponents) -> None:
    if not components.settings.debug_mode:
        return

    with st.expander("⚙️ Settings"):
        status = validate_all_settings()
        if status.get("storage", False):
            st.success(f"✅ Storage - {components.settings.storage_path}")
        else:
            st.error(f"❌ Storage - {status.get('storage_error', 'Not configured')}")


def main():
    """Main application entry point."""
    components = get_components()

    st.title("Expense Tracker")
    render_theme_toggle()
    render_add_form(components.expense_form, components.expense_store)
    st.divider()
    render_expense_list(components)
    render_settings(components)


if __name__ == "__main__":
    main()
