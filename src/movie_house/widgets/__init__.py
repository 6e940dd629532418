"""Widget helpers extracted from app.py for modular UI composition."""

from movie_house.widgets.listing import (
    escape_rich_text,
    render_movie_option,
    set_ascii_icons,
)

__all__ = [
    "escape_rich_text",
    "render_movie_option",
    "set_ascii_icons",
]
