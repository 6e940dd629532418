"""Page accounting and append-or-replace merging of search results."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from movie_house.models import OMDB_PAGE_SIZE, MovieSummary


def total_pages_for(total_results: int, page_size: int = OMDB_PAGE_SIZE) -> int:
    """Return ``ceil(total_results / page_size)``, never less than 1."""
    if total_results <= 0:
        return 1
    return max(1, math.ceil(total_results / page_size))


def is_append(page: int, append_mode: bool) -> bool:
    """Return True when a response should extend rather than replace results."""
    return append_mode and page > 1


class PaginationTracker:
    """Merges page responses into the accumulated result sequence.

    Appended pages are de-duplicated by ``imdb_id`` because the service can
    repeat a title across page boundaries; the first occurrence wins.
    """

    def __init__(self, page_size: int = OMDB_PAGE_SIZE, dedupe: bool = True) -> None:
        self.page_size = page_size
        self.dedupe = dedupe

    def apply_response(
        self,
        page: int,
        total_results: int,
        items: Iterable[MovieSummary],
        append_mode: bool,
        results: Sequence[MovieSummary] = (),
    ) -> tuple[list[MovieSummary], int]:
        """Return ``(results, total_pages)`` after merging one successful page."""
        total_pages = total_pages_for(total_results, self.page_size)
        if not is_append(page, append_mode):
            return list(items), total_pages

        merged = list(results)
        if not self.dedupe:
            merged.extend(items)
            return merged, total_pages
        seen = {movie.imdb_id for movie in merged}
        for movie in items:
            if movie.imdb_id in seen:
                continue
            seen.add(movie.imdb_id)
            merged.append(movie)
        return merged, total_pages

    def apply_error(
        self,
        page: int,
        append_mode: bool,
        results: Sequence[MovieSummary],
        total_pages: int,
    ) -> tuple[list[MovieSummary], int]:
        """Return ``(results, total_pages)`` after a negative response.

        A failed first page clears everything; a failed continuation keeps the
        accumulated pages and stops further paging at the current page.
        """
        if not is_append(page, append_mode):
            return [], 1
        return list(results), max(1, min(total_pages, page))

    @staticmethod
    def can_advance(page: int, total_pages: int) -> bool:
        return page < total_pages

    @staticmethod
    def next_page(page: int) -> int:
        return page + 1


__all__ = ["PaginationTracker", "is_append", "total_pages_for"]
