"""Query orchestration: decides what to fetch, when, and how to merge it.

The controller owns the single :class:`SearchState` and exposes one dispatch
method per event type:

    set_query_text()     free-text edits (debounced in Search mode)
    set_filters()        media-type / year changes (immediate)
    request_next_page()  infinite-scroll continuation (immediate, append)
    on_scroll()          raw scroll geometry -> request_next_page()
    clear()              reset everything and rediscover (immediate)
    start(), retry()     initial load and manual recovery

Every issued fetch carries a sequence number; only the response for the most
recently issued request may touch state, so overlapping fetches cannot
overwrite newer results.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from movie_house.debounce import DebounceTimer
from movie_house.keywords import KeywordPicker
from movie_house.models import (
    SEARCH_DEBOUNCE_DELAY,
    TRANSPORT_ERROR_MESSAGE,
    FetchRequest,
    QueryPhase,
    SearchFilters,
    SearchMode,
    SearchOutcome,
    SearchState,
)
from movie_house.pagination import PaginationTracker, is_append
from movie_house.scroll import ScrollMonitor
from movie_house.services.interfaces import MetadataService
from movie_house.services.omdb_service import MetadataTransportError

logger = logging.getLogger(__name__)


class QueryController:
    """State machine driving Discovery/Search fetches for one search view."""

    def __init__(
        self,
        metadata: MetadataService,
        *,
        picker: KeywordPicker | None = None,
        tracker: PaginationTracker | None = None,
        scroll_monitor: ScrollMonitor | None = None,
        debounce_seconds: float = SEARCH_DEBOUNCE_DELAY,
        on_change: Callable[[SearchState], None] | None = None,
        state: SearchState | None = None,
    ) -> None:
        self._metadata = metadata
        self._picker = picker or KeywordPicker()
        self._tracker = tracker or PaginationTracker()
        self._scroll_monitor = scroll_monitor or ScrollMonitor()
        self._timer = DebounceTimer()
        self._debounce_seconds = debounce_seconds
        self._on_change = on_change
        self.state = state or SearchState()

        self._sequence: int = 0
        self._last_request: FetchRequest | None = None
        # Background task tracking (prevent GC of fire-and-forget tasks)
        self._tasks: set[asyncio.Task[None]] = set()

    # ── Introspection ───────────────────────────────────────────────────

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently issued request."""
        return self._sequence

    @property
    def last_request(self) -> FetchRequest | None:
        return self._last_request

    @property
    def debounce_pending(self) -> bool:
        return self._timer.pending

    def resolve_effective_query(self) -> str:
        """Return the term a fresh page-1 fetch would use right now.

        Discovery mode draws a new keyword on every call.
        """
        if self.state.mode is SearchMode.SEARCH:
            return self.state.query_text
        return self._picker.pick()

    # ── Event dispatch ──────────────────────────────────────────────────

    def start(self) -> asyncio.Task[None]:
        """Issue the initial fetch for whatever state the view starts with."""
        return self._issue(self.resolve_effective_query(), page=1, append_mode=False)

    def set_query_text(self, text: str) -> asyncio.Task[None] | None:
        """Handle a free-text edit.

        Blank text switches to Discovery and fetches immediately; anything
        else arms the debounce timer so only the last edit in a burst fetches.
        """
        if text == self.state.query_text:
            return None
        self.state.query_text = text
        self.state.page = 1

        if self.state.mode is SearchMode.DISCOVERY:
            self._timer.cancel()
            return self._issue(self._picker.pick(), page=1, append_mode=False)

        self._timer.schedule(lambda: self._fire_debounced(text), self._debounce_seconds)
        self.state.phase = QueryPhase.AWAITING_DEBOUNCE
        self._notify()
        return None

    def set_filters(
        self, media_type: str | None = None, year: str | None = None
    ) -> asyncio.Task[None] | None:
        """Handle a media-type or year change with an immediate page-1 fetch.

        Edits that leave the request unchanged (e.g. a partially typed year)
        are stored without fetching.
        """
        filters = SearchFilters(media_type=media_type or None, year=year or None)
        previous = self.state.filters
        self.state.filters = filters
        if (filters.media_type, filters.effective_year) == (
            previous.media_type,
            previous.effective_year,
        ):
            return None

        # The immediate fetch already carries the current text.
        self._timer.cancel()
        self.state.page = 1
        return self._issue(self.resolve_effective_query(), page=1, append_mode=False)

    def request_next_page(self) -> asyncio.Task[None] | None:
        """Load the following page onto the current results, if allowed."""
        state = self.state
        if state.loading or not self._tracker.can_advance(state.page, state.total_pages):
            return None
        # A pending search will replace these results
        if self._timer.pending:
            return None
        # Continue the lineage of the results on screen, not a fresh draw
        query = state.effective_query or self.resolve_effective_query()
        return self._issue(query, page=self._tracker.next_page(state.page), append_mode=True)

    def on_scroll(
        self, scroll_offset: float, viewport_height: float, content_height: float
    ) -> asyncio.Task[None] | None:
        """Feed scroll geometry to the scroll monitor; page on demand."""
        state = self.state
        if not self._scroll_monitor.should_request_next_page(
            scroll_offset=scroll_offset,
            viewport_height=viewport_height,
            content_height=content_height,
            loading=state.loading,
            page=state.page,
            total_pages=state.total_pages,
        ):
            return None
        return self.request_next_page()

    def clear(self) -> asyncio.Task[None]:
        """Reset text, filters, and results, then rediscover with a fresh keyword."""
        self._timer.cancel()
        state = self.state
        state.query_text = ""
        state.filters = SearchFilters()
        state.page = 1
        state.total_pages = 1
        state.results = []
        state.error = ""
        return self._issue(self._picker.pick(), page=1, append_mode=False)

    def retry(self) -> asyncio.Task[None] | None:
        """Re-issue the last request (no automatic retries ever happen)."""
        request = self._last_request
        if request is None or self.state.loading:
            return None
        return self._issue(
            request.effective_query,
            page=request.page,
            append_mode=request.append_mode,
            filters=request.filters,
        )

    # ── Fetch lifecycle ─────────────────────────────────────────────────

    def _fire_debounced(self, text: str) -> None:
        if text != self.state.query_text:
            return
        self._issue(text, page=1, append_mode=False)

    def _issue(
        self,
        effective_query: str,
        *,
        page: int,
        append_mode: bool,
        filters: SearchFilters | None = None,
    ) -> asyncio.Task[None]:
        self._sequence += 1
        request = FetchRequest(
            effective_query=effective_query,
            page=page,
            filters=filters if filters is not None else self.state.filters,
            append_mode=append_mode,
            sequence=self._sequence,
        )
        self._last_request = request

        state = self.state
        state.page = page
        state.effective_query = effective_query
        state.loading = True
        state.error = ""
        state.phase = QueryPhase.FETCHING
        logger.debug(
            "Fetch #%d: s=%r page=%d append=%s filters=%s",
            request.sequence,
            request.effective_query,
            request.page,
            request.append_mode,
            request.filters,
        )
        self._notify()
        return self._track_task(self._execute(request))

    def _is_current(self, request: FetchRequest) -> bool:
        return request.sequence == self._sequence

    async def _execute(self, request: FetchRequest) -> None:
        try:
            outcome = await self._metadata.search(request)
        except MetadataTransportError as exc:
            if self._is_current(request):
                logger.warning("Fetch #%d failed: %s", request.sequence, exc)
                self._apply_transport_error(request)
        except Exception:
            if self._is_current(request):
                logger.exception("Fetch #%d raised unexpectedly", request.sequence)
                self._apply_transport_error(request)
        else:
            if self._is_current(request):
                self._apply_outcome(request, outcome)
        finally:
            if self._is_current(request):
                self.state.loading = False
                self._notify()
            else:
                logger.debug(
                    "Discarding stale response #%d (latest #%d)",
                    request.sequence,
                    self._sequence,
                )

    def _apply_outcome(self, request: FetchRequest, outcome: SearchOutcome) -> None:
        state = self.state
        if outcome.ok:
            state.results, state.total_pages = self._tracker.apply_response(
                request.page,
                outcome.total_results,
                outcome.items,
                request.append_mode,
                state.results,
            )
            state.error = ""
            self._settle(QueryPhase.IDLE)
            return

        state.results, state.total_pages = self._tracker.apply_error(
            request.page, request.append_mode, state.results, state.total_pages
        )
        if is_append(request.page, request.append_mode):
            # Past the last page: keep what is on screen, stop paging
            logger.debug("No more results after page %d", request.page)
            state.page = state.total_pages
            self._settle(QueryPhase.IDLE)
            return
        state.error = outcome.error
        self._settle(QueryPhase.ERRORED)

    def _apply_transport_error(self, request: FetchRequest) -> None:
        state = self.state
        state.error = TRANSPORT_ERROR_MESSAGE
        if is_append(request.page, request.append_mode):
            # Page was never loaded; let the next scroll ask for it again
            state.page = max(1, request.page - 1)
        else:
            state.results = []
            state.total_pages = 1
        self._settle(QueryPhase.ERRORED)

    def _settle(self, phase: QueryPhase) -> None:
        self.state.phase = QueryPhase.AWAITING_DEBOUNCE if self._timer.pending else phase

    # ── Task bookkeeping ────────────────────────────────────────────────

    def _track_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in fetch task: %s", exc, exc_info=exc)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)

    async def wait_idle(self) -> None:
        """Wait until every in-flight fetch has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self, timeout: float = 0.5) -> None:
        """Cancel the debounce timer and any in-flight fetches."""
        self._timer.cancel()
        self._on_change = None
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=timeout)
            for task in still_pending:
                logger.debug("Fetch task did not cancel before shutdown: %r", task)
        self._tasks.clear()


__all__ = ["QueryController"]
