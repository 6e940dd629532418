"""Color palette, media-type colors, and the Textual theme builder."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

THEME_NAME = "movie-house"

DEFAULT_THEME = {
    "background": "#272822",
    "panel": "#1e1e1e",
    "panel_alt": "#3e3d32",
    "text": "#f8f8f2",
    "muted": "#75715e",
    "accent": "#66d9ef",
    "accent_alt": "#e6db74",
    "green": "#a6e22e",
    "yellow": "#e6db74",
    "orange": "#fd971f",
    "pink": "#f92672",
    "purple": "#ae81ff",
    "highlight": "#49483e",
    "highlight_focus": "#5a5950",
}

THEME_COLORS = DEFAULT_THEME.copy()

# Media type badge colors (Monokai palette)
MEDIA_TYPE_COLORS: dict[str, str] = {
    "movie": "#66d9ef",  # blue
    "series": "#a6e22e",  # green
    "episode": "#fd971f",  # orange
}
DEFAULT_MEDIA_TYPE_COLOR = "#888888"


def get_media_type_color(media_type: str) -> str:
    """Return the badge color for an OMDb ``Type`` value."""
    return MEDIA_TYPE_COLORS.get(media_type.lower(), DEFAULT_MEDIA_TYPE_COLOR)


def build_textual_theme(name: str = THEME_NAME, colors: dict[str, str] | None = None) -> TextualTheme:
    """Convert the app palette to a Textual Theme with ``$th-*`` CSS variables."""
    colors = colors or DEFAULT_THEME
    variables = {
        "th-background": colors["background"],
        "th-panel": colors["panel"],
        "th-panel-alt": colors["panel_alt"],
        "th-highlight": colors["highlight"],
        "th-highlight-focus": colors["highlight_focus"],
        "th-accent": colors["accent"],
        "th-accent-alt": colors["accent_alt"],
        "th-muted": colors["muted"],
        "th-text": colors["text"],
        "th-error": colors["pink"],
    }
    return TextualTheme(
        name=name,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["purple"],
        warning=colors["orange"],
        error=colors["pink"],
        success=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        dark=True,
        variables=variables,
    )


__all__ = [
    "DEFAULT_MEDIA_TYPE_COLOR",
    "DEFAULT_THEME",
    "MEDIA_TYPE_COLORS",
    "THEME_COLORS",
    "THEME_NAME",
    "build_textual_theme",
    "get_media_type_color",
]
