"""OMDb request parameters and response decoding."""

from __future__ import annotations

import logging
from typing import Any

from movie_house.models import (
    NO_RESULTS_MESSAGE,
    POSTER_MISSING,
    POSTER_PLACEHOLDER_URL,
    FetchRequest,
    MovieSummary,
    SearchOutcome,
)

logger = logging.getLogger(__name__)


def build_search_params(request: FetchRequest, api_key: str) -> dict[str, str | int]:
    """Build the flat query mapping for an OMDb search request.

    ``type`` is sent only when a media-type filter is set and ``y`` only when
    the year filter is exactly four digits; a malformed year is omitted.
    """
    params: dict[str, str | int] = {
        "apikey": api_key,
        "s": request.effective_query,
        "page": request.page,
    }
    if request.filters.media_type:
        params["type"] = request.filters.media_type
    year = request.filters.effective_year
    if year is not None:
        params["y"] = year
    return params


def resolve_poster_url(poster: str | None) -> str:
    """Return a displayable poster URL, substituting the placeholder.

    Idempotent: the placeholder resolves to itself.
    """
    cleaned = (poster or "").strip()
    if not cleaned or cleaned == POSTER_MISSING:
        return POSTER_PLACEHOLDER_URL
    return cleaned


def _parse_total_results(raw: Any) -> int:
    try:
        return max(0, int(str(raw).strip()))
    except (TypeError, ValueError):
        logger.debug("Unparseable totalResults %r, treating as 0", raw)
        return 0


def parse_movie_summary(raw: Any) -> MovieSummary | None:
    """Convert one ``Search`` entry into a MovieSummary (None if unusable)."""
    if not isinstance(raw, dict):
        return None
    imdb_id = raw.get("imdbID")
    if not isinstance(imdb_id, str) or not imdb_id.strip():
        return None
    poster = raw.get("Poster")
    return MovieSummary(
        imdb_id=imdb_id.strip(),
        title=str(raw.get("Title") or ""),
        year=str(raw.get("Year") or ""),
        media_type=str(raw.get("Type") or ""),
        poster_url=None if not isinstance(poster, str) or poster == POSTER_MISSING else poster,
    )


def parse_search_payload(payload: Any) -> SearchOutcome:
    """Decode an OMDb search response.

    Raises:
        ValueError: If the payload is not a search response at all.
    """
    if not isinstance(payload, dict) or "Response" not in payload:
        raise ValueError("Malformed OMDb response")

    if str(payload["Response"]).strip().lower() != "true":
        message = payload.get("Error")
        return SearchOutcome(
            ok=False,
            error=message if isinstance(message, str) and message else NO_RESULTS_MESSAGE,
        )

    raw_items = payload.get("Search")
    if not isinstance(raw_items, list):
        raise ValueError("Malformed OMDb response: missing Search list")
    items = tuple(movie for movie in map(parse_movie_summary, raw_items) if movie is not None)
    return SearchOutcome(
        ok=True,
        items=items,
        total_results=_parse_total_results(payload.get("totalResults")),
    )


__all__ = [
    "build_search_params",
    "parse_movie_summary",
    "parse_search_payload",
    "resolve_poster_url",
]
