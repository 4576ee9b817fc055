"""
Theme Store

Holds the dark/light preference, persists it, and hands it to the
render functions through an explicit scope.

DESIGN DECISION: There is no module-level "current theme". The composition
root puts one ThemeStore into a scope mapping (the Streamlit session state)
and every render function that needs the theme asks that scope for it via
use_theme(). Asking a scope that was never given a store is an integration
mistake and raises immediately instead of falling back to a default.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from src.audit import AuditLogger
from src.models.expense import Theme
from src.services.storage import (
    THEME_KEY,
    KeyValueStorageInterface,
    StorageError,
)


THEME_SCOPE_KEY = "theme_store"

# Shown on the toggle: the icon of the theme you would switch to
TOGGLE_ICONS = {
    Theme.DARK: "☀️",
    Theme.LIGHT: "🌙",
}


class ThemeScopeError(RuntimeError):
    """use_theme() was called on a scope that has no theme store."""
    pass


class ThemeStore:
    """The active theme and its single mutation, toggle()."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        default: Theme = Theme.DARK,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._current = self._load(default)

    def _load(self, default: Theme) -> Theme:
        try:
            saved = self._storage.get_item(THEME_KEY)
        except StorageError as e:
            self._audit_logger.log_storage_load_failed(THEME_KEY, str(e))
            return default

        if not saved:
            return default

        try:
            return Theme(saved)
        except ValueError:
            self._audit_logger.log_storage_load_failed(
                THEME_KEY, f"unknown theme {saved!r}"
            )
            return default

    @property
    def current(self) -> Theme:
        return self._current

    @property
    def is_dark(self) -> bool:
        return self._current is Theme.DARK

    @property
    def body_class(self) -> str:
        """CSS class applied to the page root."""
        return self._current.value

    @property
    def toggle_icon(self) -> str:
        return TOGGLE_ICONS[self._current]

    def toggle(self) -> Theme:
        """
        Switch dark <-> light and persist the new value.

        A failed write is audited; the in-memory theme still changes.
        """
        previous = self._current
        self._current = previous.toggled()

        try:
            self._storage.set_item(THEME_KEY, self._current.value)
        except StorageError as e:
            self._audit_logger.log_storage_write_failed(THEME_KEY, str(e))

        self._audit_logger.log_theme_toggled(previous.value, self._current.value)
        return self._current


def provide_theme(scope: MutableMapping[str, Any], store: ThemeStore) -> ThemeStore:
    """Make a theme store available to everything rendered from this scope."""
    scope[THEME_SCOPE_KEY] = store
    return store


def use_theme(scope: Mapping[str, Any]) -> ThemeStore:
    """
    Get the theme store provided to this scope.

    Raises:
        ThemeScopeError: If provide_theme() was never called for the scope
    """
    store = scope.get(THEME_SCOPE_KEY)
    if not isinstance(store, ThemeStore):
        raise ThemeScopeError("use_theme() must be called within a scope that provides a ThemeStore")
    return store
