"""Shared test fixtures for MovieHouse tests."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Callable
from typing import Any

import pytest

from movie_house.keywords import KeywordPicker
from movie_house.models import FetchRequest, MovieSummary, SearchOutcome
from movie_house.widgets import listing as _listing

# ── Module-level state isolation ─────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_icon_set():
    """Restore the Unicode icon set after each test.

    MovieHouse.__init__ may switch the module-level icon set to ASCII.
    """
    yield
    _listing.set_ascii_icons(False)


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_movie():
    """Factory fixture for creating MovieSummary instances with sensible defaults."""

    def _make(
        imdb_id: str = "tt0000001",
        title: str = "Test Movie",
        year: str = "2020",
        media_type: str = "movie",
        poster_url: str | None = "https://example.com/poster.jpg",
    ) -> MovieSummary:
        return MovieSummary(
            imdb_id=imdb_id,
            title=title,
            year=year,
            media_type=media_type,
            poster_url=poster_url,
        )

    return _make


@pytest.fixture
def make_movies(make_movie):
    """Factory fixture for a page of consecutively numbered movies."""

    def _make(count: int = 10, start: int = 1, prefix: str = "Movie") -> list[MovieSummary]:
        return [
            make_movie(imdb_id=f"tt{n:07d}", title=f"{prefix} {n}")
            for n in range(start, start + count)
        ]

    return _make


@pytest.fixture
def make_payload():
    """Factory fixture for raw OMDb ``Response: True`` payloads."""

    def _make(count: int = 10, total: int = 42, start: int = 1) -> dict[str, Any]:
        return {
            "Response": "True",
            "totalResults": str(total),
            "Search": [
                {
                    "Title": f"Batman {n}",
                    "Year": "2005",
                    "imdbID": f"tt{n:07d}",
                    "Type": "movie",
                    "Poster": "N/A" if n % 2 else f"https://example.com/{n}.jpg",
                }
                for n in range(start, start + count)
            ],
        }

    return _make


@pytest.fixture
def seeded_picker():
    """Keyword picker with a deterministic randomness source."""
    return KeywordPicker(rng=random.Random(1234))


class FakeMetadataService:
    """In-memory MetadataService that records requests.

    ``responder`` maps a FetchRequest to a SearchOutcome or an exception to
    raise. ``hold(n)`` parks the n-th request (1-based sequence) until the
    returned event is set, so tests can control response ordering.
    """

    def __init__(self, responder: Callable[[FetchRequest], Any] | None = None) -> None:
        self.requests: list[FetchRequest] = []
        self.responder = responder or (lambda request: SearchOutcome(ok=True))
        self._gates: dict[int, asyncio.Event] = {}

    def hold(self, sequence: int) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[sequence] = gate
        return gate

    async def search(self, request: FetchRequest) -> SearchOutcome:
        self.requests.append(request)
        gate = self._gates.get(request.sequence)
        if gate is not None:
            await gate.wait()
        result = self.responder(request)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def fake_service():
    """Factory fixture for FakeMetadataService."""

    def _make(responder: Callable[[FetchRequest], Any] | None = None) -> FakeMetadataService:
        return FakeMetadataService(responder)

    return _make
