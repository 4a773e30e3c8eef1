"""
The rendering-surface side of theming.

ThemeStore never touches a real document. It calls ``apply_theme`` with a
DocumentSurface, and a UI adapter mirrors the surface onto whatever it renders.
"""

from whispernotes.models import Theme

STYLE_VARIABLES = (
    ("--theme-primary", "primary_color"),
    ("--theme-secondary", "secondary_color"),
    ("--theme-accent", "accent_color"),
)
DARK_CLASS = "dark"
THEME_MARKER_PREFIX = "theme-"


def theme_marker(theme: Theme) -> str:
    return f"{THEME_MARKER_PREFIX}{theme.id}"


class DocumentSurface:
    """In-memory model of the document root and body the theme is published to."""

    def __init__(self, body_classes: set[str] | None = None):
        self.style_properties: dict[str, str] = {}
        self.root_classes: set[str] = set()
        self.body_classes: set[str] = set(body_classes or ())

    def set_style_property(self, name: str, value: str) -> None:
        self.style_properties[name] = value

    def set_root_class(self, name: str, enabled: bool) -> None:
        if enabled:
            self.root_classes.add(name)
        else:
            self.root_classes.discard(name)

    def replace_body_marker(self, prefix: str, marker: str) -> None:
        """Drop every body class starting with ``prefix`` and add ``marker``."""
        self.body_classes = {c for c in self.body_classes if not c.startswith(prefix)}
        self.body_classes.add(marker)

    def published_state(self) -> dict:
        return {
            "style": dict(self.style_properties),
            "root": sorted(self.root_classes),
            "body": sorted(self.body_classes),
        }


def apply_theme(surface: DocumentSurface, theme: Theme) -> None:
    """
    Publish a theme to the surface.

    Idempotent: applying the same theme twice leaves the same state, and
    switching themes leaves no marker from the previous one.
    """
    for variable, field in STYLE_VARIABLES:
        surface.set_style_property(variable, getattr(theme, field))
    surface.set_root_class(DARK_CLASS, theme.is_dark)
    surface.replace_body_marker(THEME_MARKER_PREFIX, theme_marker(theme))
