#!/usr/bin/env python3
"""MovieHouse TUI - search OMDb for movies, series, and episodes.

Usage:
    movie-house                          # Discover with a random keyword
    movie-house --query batman           # Start with a search
    movie-house --type series --year 2020

Key bindings:
    /       - Focus the search box
    escape  - Focus the results list
    n       - Load the next page (scrolling to the bottom does the same)
    r       - Retry the last request
    ctrl+l  - Clear search text, filters, and results
    q       - Quit
"""

from __future__ import annotations

import logging

import httpx
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Button, Footer, Header, Input, Label, OptionList, Select
from textual.widgets.option_list import Option

from movie_house.action_messages import (
    build_list_empty_message,
    build_results_header,
    build_search_error_message,
)
from movie_house.cli import main
from movie_house.config import resolve_api_key
from movie_house.controller import QueryController
from movie_house.keywords import KeywordPicker
from movie_house.models import (
    MEDIA_TYPES,
    MovieSummary,
    SearchFilters,
    SearchState,
    UserConfig,
)
from movie_house.scroll import ScrollMonitor
from movie_house.services import AppServices, build_default_app_services
from movie_house.themes import THEME_NAME, build_textual_theme
from movie_house.ui_constants import APP_BINDINGS, APP_CSS, SCROLL_THRESHOLD_ROWS
from movie_house.widgets import render_movie_option, set_ascii_icons

logger = logging.getLogger(__name__)

IMDB_TITLE_URL = "https://www.imdb.com/title/{imdb_id}/"

TYPE_FILTER_OPTIONS: list[tuple[str, str]] = [(t.capitalize(), t) for t in MEDIA_TYPES]


class MovieHouse(App):
    """A TUI application to search movie metadata."""

    TITLE = "MovieHouse"
    AUTO_FOCUS = "#movie-list"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        *,
        initial_query: str = "",
        initial_filters: SearchFilters | None = None,
        api_key: str | None = None,
        ascii_icons: bool = False,
        services: AppServices | None = None,
        picker: KeywordPicker | None = None,
    ) -> None:
        super().__init__()
        self.register_theme(build_textual_theme())
        self.theme = THEME_NAME

        self._config = config or UserConfig()
        # Shared HTTP client for connection pooling (created in on_mount)
        self._http_client: httpx.AsyncClient | None = None
        self._services: AppServices = services or build_default_app_services(
            api_key=api_key or resolve_api_key(self._config),
            timeout_seconds=self._config.request_timeout_seconds,
            client_getter=lambda: self._http_client,
        )
        self._initial_query = initial_query
        self._initial_filters = initial_filters or SearchFilters()
        self._rendered_ids: list[str] = []

        set_ascii_icons(ascii_icons or self._config.ascii_icons)

        self.controller = QueryController(
            self._services.metadata,
            picker=picker,
            scroll_monitor=ScrollMonitor(threshold=SCROLL_THRESHOLD_ROWS),
            debounce_seconds=self._config.debounce_seconds,
            on_change=self._on_search_state_changed,
            state=SearchState(query_text=initial_query, filters=self._initial_filters),
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            with Horizontal(id="search-bar"):
                yield Input(
                    value=self._initial_query,
                    placeholder="Search movies...",
                    id="search-input",
                )
            with Horizontal(id="filters"):
                yield self._build_type_filter()
                yield Input(
                    value=self._initial_filters.year or "",
                    placeholder="Year (e.g., 2020)",
                    type="integer",
                    max_length=4,
                    id="year-filter",
                )
                yield Button("Clear All", variant="warning", id="clear-button")
            yield Label(" Discover", id="list-header")
            yield OptionList(id="movie-list")
            yield Label("", id="status-bar")
        yield Footer()

    def _build_type_filter(self) -> Select:
        # No `value` leaves the prompt ("All Types") selected
        initial = self._initial_filters.media_type
        if initial:
            return Select(TYPE_FILTER_OPTIONS, prompt="All Types", value=initial, id="type-filter")
        return Select(TYPE_FILTER_OPTIONS, prompt="All Types", id="type-filter")

    def on_mount(self) -> None:
        """Create the shared client, start watching scroll, and run the first fetch."""
        self._http_client = httpx.AsyncClient()

        if self._config.config_defaulted:
            self.notify(
                "Config file was corrupt and has been backed up. Using defaults.",
                severity="warning",
                timeout=8,
            )

        self.watch(self._get_movie_list_widget(), "scroll_y", self._on_list_scrolled, init=False)
        self.controller.start()
        logger.debug(
            "App mounted: query=%r filters=%s",
            self._initial_query,
            self._initial_filters,
        )

        try:
            self._get_movie_list_widget().focus()
        except NoMatches:
            pass

    async def on_unmount(self) -> None:
        """Cancel in-flight fetches and close the shared HTTP client."""
        await self.controller.aclose()

        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    # ── Widget lookup ───────────────────────────────────────────────────

    def _get_search_input_widget(self) -> Input:
        return self.query_one("#search-input", Input)

    def _get_type_filter_widget(self) -> Select:
        return self.query_one("#type-filter", Select)

    def _get_year_filter_widget(self) -> Input:
        return self.query_one("#year-filter", Input)

    def _get_movie_list_widget(self) -> OptionList:
        return self.query_one("#movie-list", OptionList)

    def _get_list_header_widget(self) -> Label:
        return self.query_one("#list-header", Label)

    def _get_status_bar_widget(self) -> Label:
        return self.query_one("#status-bar", Label)

    # ── Input events → controller ───────────────────────────────────────

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        """Forward free-text edits; the controller debounces them."""
        self.controller.set_query_text(event.value)

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        self._get_movie_list_widget().focus()

    @on(Select.Changed, "#type-filter")
    def on_type_filter_changed(self, event: Select.Changed) -> None:
        media_type = event.value if isinstance(event.value, str) else None
        self.controller.set_filters(media_type, self.controller.state.filters.year)

    @on(Input.Changed, "#year-filter")
    def on_year_filter_changed(self, event: Input.Changed) -> None:
        self.controller.set_filters(self.controller.state.filters.media_type, event.value)

    @on(Button.Pressed, "#clear-button")
    def on_clear_pressed(self, event: Button.Pressed) -> None:
        self.action_clear_all()

    @on(OptionList.OptionSelected, "#movie-list")
    def on_movie_selected(self, event: OptionList.OptionSelected) -> None:
        movie = self._movie_at(event.option_index)
        if movie is None:
            return
        self.notify(
            f"{movie.title} ({movie.year})\n{IMDB_TITLE_URL.format(imdb_id=movie.imdb_id)}",
            title="MovieHouse",
        )

    def _on_list_scrolled(self, _old: float, new: float) -> None:
        option_list = self._get_movie_list_widget()
        self.controller.on_scroll(
            scroll_offset=new,
            viewport_height=option_list.scrollable_content_region.height,
            content_height=option_list.virtual_size.height,
        )

    # ── Actions ─────────────────────────────────────────────────────────

    def action_focus_search(self) -> None:
        self._get_search_input_widget().focus()

    def action_focus_list(self) -> None:
        self._get_movie_list_widget().focus()

    def action_next_page(self) -> None:
        state = self.controller.state
        if state.loading:
            return
        if not state.has_more_pages:
            self.notify("No more results", title="MovieHouse")
            return
        self.controller.request_next_page()

    def action_retry(self) -> None:
        if self.controller.retry() is None:
            self.notify("Nothing to retry yet", title="MovieHouse", severity="warning")

    def action_clear_all(self) -> None:
        """Reset text, filters, and results, then discover something new."""
        self.controller.clear()
        # Widget resets echo Changed events; the controller ignores no-op edits
        self._get_search_input_widget().value = ""
        self._get_year_filter_widget().value = ""
        self._get_type_filter_widget().clear()

    # ── Rendering ───────────────────────────────────────────────────────

    def _movie_at(self, index: int | None) -> MovieSummary | None:
        results = self.controller.state.results
        if index is None or not 0 <= index < len(results):
            return None
        return results[index]

    def _on_search_state_changed(self, state: SearchState) -> None:
        try:
            self._refresh_list_view(state)
            self._update_list_header(state)
            self._update_status_bar(state)
        except NoMatches:
            # State can change before compose finishes or after teardown
            return

    def _refresh_list_view(self, state: SearchState) -> None:
        """Sync the option list with results, appending when possible."""
        option_list = self._get_movie_list_widget()
        new_ids = [movie.imdb_id for movie in state.results]
        if new_ids == self._rendered_ids:
            return

        prefix = len(self._rendered_ids)
        if prefix and new_ids[:prefix] == self._rendered_ids:
            option_list.add_options(
                Option(render_movie_option(movie)) for movie in state.results[prefix:]
            )
        else:
            option_list.clear_options()
            option_list.add_options(Option(render_movie_option(movie)) for movie in state.results)
            if state.results:
                option_list.highlighted = 0
        self._rendered_ids = new_ids

    def _update_list_header(self, state: SearchState) -> None:
        self._get_list_header_widget().update(build_results_header(state))

    def _update_status_bar(self, state: SearchState) -> None:
        status_bar = self._get_status_bar_widget()
        if state.error:
            status_bar.add_class("error")
            status_bar.update(f"😢 {build_search_error_message(state.error)}")
            return
        status_bar.remove_class("error")
        if state.loading or not state.results:
            status_bar.update(build_list_empty_message(state))
        elif state.has_more_pages:
            status_bar.update("[dim]Scroll down or press [bold]n[/bold] for more.[/]")
        else:
            status_bar.update("[dim]End of results.[/]")


__all__ = ["MovieHouse", "main"]


if __name__ == "__main__":
    raise SystemExit(main())
