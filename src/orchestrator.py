"""
Composition Root for Expense Tracker

This module ties together all the components for one user session:
storage → stores → view models, sharing a single audit logger.

DESIGN DECISION: Nothing in the app reaches for global state. The page
asks create_app_components() for a component set once per session and
passes the pieces down explicitly; the theme store is additionally
provided through the session scope for use_theme().
"""

from collections.abc import MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from src.audit import AuditLogger, configure_logging
from src.config import AppSettings, get_settings
from src.models.expense import Theme
from src.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
)
from src.stores import ExpenseStore, ThemeStore, provide_theme
from src.validation import ExpenseInputValidator
from src.views import EditSession, ExpenseForm


@dataclass
class AppComponents:
    """Everything one session of the page needs."""
    settings: AppSettings
    storage: KeyValueStorageInterface
    audit_logger: AuditLogger
    expense_store: ExpenseStore
    theme_store: ThemeStore
    expense_form: ExpenseForm
    edit_session: EditSession


def create_app_components(
    use_storage: bool = True,
    storage: Optional[KeyValueStorageInterface] = None,
    settings: Optional[AppSettings] = None,
    scope: Optional[MutableMapping[str, Any]] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured JSON file.
                     Set to False to keep state in memory only.
        storage: Explicit storage backend (overrides use_storage).
        settings: Settings to use instead of the cached ones.
        scope: Mapping to provide the theme store into
               (the Streamlit session state).

    Returns:
        The wired AppComponents
    """
    settings = settings or get_settings().app
    configure_logging(settings.log_level)
    audit_logger = AuditLogger()

    if storage is None:
        if use_storage:
            storage = JsonFileStorage(Path(settings.storage_path))
        else:
            storage = InMemoryStorage()

    validator = ExpenseInputValidator()

    components = AppComponents(
        settings=settings,
        storage=storage,
        audit_logger=audit_logger,
        expense_store=ExpenseStore(storage, audit_logger),
        theme_store=ThemeStore(
            storage,
            audit_logger,
            default=Theme(settings.default_theme),
        ),
        expense_form=ExpenseForm(validator, audit_logger),
        edit_session=EditSession(validator, audit_logger),
    )

    if scope is not None:
        provide_theme(scope, components.theme_store)

    return components
