"""State stores: the expense list and the theme preference."""

from src.stores.expense_store import (
    ExpenseStore,
    MonotonicIdGenerator,
    dump_expenses,
    load_expenses,
)
from src.stores.theme_store import (
    ThemeScopeError,
    ThemeStore,
    provide_theme,
    use_theme,
)

__all__ = [
    "ExpenseStore",
    "MonotonicIdGenerator",
    "dump_expenses",
    "load_expenses",
    "ThemeScopeError",
    "ThemeStore",
    "provide_theme",
    "use_theme",
]
