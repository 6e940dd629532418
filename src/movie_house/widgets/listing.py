"""List rendering helpers for movie result cards."""

from __future__ import annotations

from rich.markup import escape as escape_markup

from movie_house.models import MovieSummary
from movie_house.parsing import resolve_poster_url
from movie_house.themes import THEME_COLORS, get_media_type_color

_ICON_SETS: dict[str, dict[str, str]] = {
    "unicode": {
        "movie": "\U0001f3ac",
        "series": "\U0001f4fa",
        "episode": "\U0001f39e",
        "unknown": "•",
        "poster_missing": "∅",
    },
    "ascii": {
        "movie": "[M]",
        "series": "[S]",
        "episode": "[E]",
        "unknown": "*",
        "poster_missing": "-",
    },
}
_ACTIVE_ICON_SET = _ICON_SETS["unicode"]


def set_ascii_icons(enabled: bool) -> None:
    """Switch list indicators between Unicode and ASCII modes."""
    global _ACTIVE_ICON_SET
    _ACTIVE_ICON_SET = _ICON_SETS["ascii"] if enabled else _ICON_SETS["unicode"]


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def _render_title_line(movie: MovieSummary) -> str:
    icon = _ACTIVE_ICON_SET.get(movie.media_type.lower(), _ACTIVE_ICON_SET["unknown"])
    title = escape_rich_text(movie.title) or "[dim italic]Untitled[/]"
    return f"{escape_rich_text(icon)} [bold]{title}[/]"


def _render_meta_line(movie: MovieSummary) -> str:
    parts = [f"[{THEME_COLORS['accent_alt']}]Year: {escape_rich_text(movie.year) or '?'}[/]"]
    if movie.media_type:
        color = get_media_type_color(movie.media_type)
        parts.append(f"[{color}]Type: {escape_rich_text(movie.media_type)}[/]")
    parts.append(f"[dim]{escape_rich_text(movie.imdb_id)}[/]")
    return "  ".join(parts)


def _render_poster_line(movie: MovieSummary) -> str:
    url = resolve_poster_url(movie.poster_url)
    if movie.poster_url is None:
        return f"[dim italic]{_ACTIVE_ICON_SET['poster_missing']} {escape_rich_text(url)}[/]"
    return f"[dim]{escape_rich_text(url)}[/]"


def render_movie_option(movie: MovieSummary, *, show_poster: bool = True) -> str:
    """Render a movie as Rich markup for OptionList display."""
    lines = [_render_title_line(movie), _render_meta_line(movie)]
    if show_poster:
        lines.append(_render_poster_line(movie))
    return "\n".join(lines)


__all__ = [
    "escape_rich_text",
    "render_movie_option",
    "set_ascii_icons",
]
