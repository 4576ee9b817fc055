"""View models for the Streamlit page."""

from src.views.expense_form import ExpenseForm
from src.views.expense_list import (
    EMPTY_STATE_MESSAGE,
    EditSession,
    compute_total,
    format_amount,
    visible_total,
)
from src.views.theme_styles import THEME_STYLESHEET, theme_root_markup

__all__ = [
    "EMPTY_STATE_MESSAGE",
    "EditSession",
    "ExpenseForm",
    "THEME_STYLESHEET",
    "compute_total",
    "format_amount",
    "theme_root_markup",
    "visible_total",
]
