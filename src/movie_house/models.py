"""Data models and constants for the MovieHouse application."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

# Application identity — single source of truth for platformdirs config paths
CONFIG_APP_NAME = "movie-house"

# OMDb search constants
OMDB_API_URL = "https://www.omdbapi.com/"
OMDB_DEMO_API_KEY = "1131a0e3"
OMDB_PAGE_SIZE = 10  # Fixed by the service, not configurable
MEDIA_TYPES = ("movie", "series", "episode")
YEAR_PATTERN = re.compile(r"[0-9]{4}")
POSTER_MISSING = "N/A"
POSTER_PLACEHOLDER_URL = "https://via.placeholder.com/300x450?text=No+Image"

# Query orchestration timings
SEARCH_DEBOUNCE_DELAY = 0.5
SEARCH_DEBOUNCE_MAX = 5.0
REQUEST_TIMEOUT_SECONDS = 10
REQUEST_TIMEOUT_MAX = 60
SCROLL_THRESHOLD = 100

# User-facing error copy
TRANSPORT_ERROR_MESSAGE = "Failed to fetch movies"
NO_RESULTS_MESSAGE = "No results found"


class SearchMode(Enum):
    """Whether the effective query comes from the user or the keyword picker."""

    DISCOVERY = "discovery"
    SEARCH = "search"


class QueryPhase(Enum):
    """Per-request lifecycle of the query controller."""

    IDLE = "idle"
    AWAITING_DEBOUNCE = "awaiting_debounce"
    FETCHING = "fetching"
    ERRORED = "errored"


def resolve_mode(query_text: str) -> SearchMode:
    """Return the search mode implied by raw query text."""
    return SearchMode.SEARCH if query_text.strip() else SearchMode.DISCOVERY


def is_valid_year(year: str | None) -> bool:
    """Return True when *year* is exactly four digits."""
    return bool(year) and YEAR_PATTERN.fullmatch(year) is not None


@dataclass(slots=True, frozen=True)
class SearchFilters:
    """Optional media-type and release-year constraints."""

    media_type: str | None = None
    year: str | None = None

    def __post_init__(self) -> None:
        # Unknown media types are dropped rather than rejected
        if self.media_type is not None and self.media_type not in MEDIA_TYPES:
            object.__setattr__(self, "media_type", None)
        if self.year is not None:
            object.__setattr__(self, "year", self.year.strip() or None)

    @property
    def effective_year(self) -> str | None:
        """The year to send, or None when the filter is malformed."""
        return self.year if is_valid_year(self.year) else None


@dataclass(slots=True)
class MovieSummary:
    """One search hit returned by the metadata service."""

    imdb_id: str
    title: str
    year: str
    media_type: str
    poster_url: str | None = None


@dataclass(slots=True, frozen=True)
class FetchRequest:
    """Fully-resolved parameters for one metadata lookup."""

    effective_query: str
    page: int = 1
    filters: SearchFilters = field(default_factory=SearchFilters)
    append_mode: bool = False
    sequence: int = 0


@dataclass(slots=True, frozen=True)
class SearchOutcome:
    """Decoded search response.

    ``ok`` mirrors the service's ``Response`` flag. A negative outcome carries
    the server-supplied message (or the default) in ``error``.
    """

    ok: bool
    items: tuple[MovieSummary, ...] = ()
    total_results: int = 0
    error: str = ""


@dataclass(slots=True)
class SearchState:
    """Single source of truth for the search view."""

    query_text: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    page: int = 1
    total_pages: int = 1
    results: list[MovieSummary] = field(default_factory=list)
    loading: bool = False
    error: str = ""
    phase: QueryPhase = QueryPhase.IDLE
    effective_query: str = ""

    @property
    def mode(self) -> SearchMode:
        return resolve_mode(self.query_text)

    @property
    def has_more_pages(self) -> bool:
        return self.page < self.total_pages


@dataclass(slots=True)
class UserConfig:
    """Persisted user preferences (never search state)."""

    api_key: str = ""  # Empty = fall back to OMDB_API_KEY / demo key
    request_timeout_seconds: int = REQUEST_TIMEOUT_SECONDS
    debounce_seconds: float = SEARCH_DEBOUNCE_DELAY
    ascii_icons: bool = False
    version: int = 1
    config_defaulted: bool = False  # Runtime flag, not persisted


__all__ = [
    "CONFIG_APP_NAME",
    "MEDIA_TYPES",
    "NO_RESULTS_MESSAGE",
    "OMDB_API_URL",
    "OMDB_DEMO_API_KEY",
    "OMDB_PAGE_SIZE",
    "POSTER_MISSING",
    "POSTER_PLACEHOLDER_URL",
    "REQUEST_TIMEOUT_MAX",
    "REQUEST_TIMEOUT_SECONDS",
    "SCROLL_THRESHOLD",
    "SEARCH_DEBOUNCE_DELAY",
    "SEARCH_DEBOUNCE_MAX",
    "TRANSPORT_ERROR_MESSAGE",
    "YEAR_PATTERN",
    "FetchRequest",
    "MovieSummary",
    "QueryPhase",
    "SearchFilters",
    "SearchMode",
    "SearchOutcome",
    "SearchState",
    "UserConfig",
    "is_valid_year",
    "resolve_mode",
]
