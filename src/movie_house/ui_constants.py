"""Internal UI constants for the MovieHouse app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $th-background;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
    border: tall $th-highlight;
    background: $th-panel;
}

#main-container:focus-within {
    border: tall $th-accent;
}

#search-bar,
#filters {
    height: auto;
    padding: 0 1;
}

#search-input {
    width: 1fr;
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

#type-filter {
    width: 24;
}

#year-filter {
    width: 22;
    background: $th-background;
}

#clear-button {
    margin-left: 1;
}

#list-header {
    padding: 0 1;
    color: $th-accent;
    text-style: bold;
}

#movie-list {
    height: 1fr;
    scrollbar-gutter: stable;
}

#movie-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#movie-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#status-bar {
    padding: 0 1;
    color: $th-muted;
}

#status-bar.error {
    color: $th-error;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit"),
    Binding("slash", "focus_search", "Search"),
    Binding("escape", "focus_list", "Results", show=False),
    Binding("n", "next_page", "More"),
    Binding("r", "retry", "Retry"),
    Binding("ctrl+l", "clear_all", "Clear All"),
]

# Remaining rows below the viewport that count as "near the bottom"
SCROLL_THRESHOLD_ROWS = 3

__all__ = ["APP_BINDINGS", "APP_CSS", "SCROLL_THRESHOLD_ROWS"]
