"""
Theme styling for the Streamlit page.

Streamlit gives no handle on the page's <body>, so the active theme is
marked with an empty element carrying ThemeStore.body_class. The
stylesheet selects on that marker with :has(), which makes the class
behave like a class on the page root.
"""

from src.models.expense import Theme

ROOT_MARKER_CLASS = "theme-root"

THEME_PALETTES = {
    Theme.DARK.value: {"background": "#121212", "text": "#e8e8e8", "rule": "#444"},
    Theme.LIGHT.value: {"background": "#fafafa", "text": "#1f1f1f", "rule": "#ccc"},
}


def _rules(body_class: str, palette: dict[str, str]) -> str:
    root = f".stApp:has(.{ROOT_MARKER_CLASS}.{body_class})"
    return (
        f"    {root} {{ background-color: {palette['background']}; color: {palette['text']}; }}\n"
        f"    {root} p, {root} label, {root} h1 {{ color: {palette['text']}; }}\n"
        f"    {root} .total-container {{ border-top: 1px solid {palette['rule']}; padding-top: 8px; }}\n"
    )


THEME_STYLESHEET = (
    "<style>\n"
    + "".join(_rules(name, palette) for name, palette in THEME_PALETTES.items())
    + "</style>"
)


def theme_root_markup(body_class: str) -> str:
    """Stylesheet plus the root marker for one theme class."""
    if body_class not in THEME_PALETTES:
        raise ValueError(f"No styles for theme class {body_class!r}")
    return f'{THEME_STYLESHEET}\n<div class="{ROOT_MARKER_CLASS} {body_class}"></div>'
