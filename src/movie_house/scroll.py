"""Bottom-of-list detection for infinite scrolling."""

from __future__ import annotations

from dataclasses import dataclass

from movie_house.models import SCROLL_THRESHOLD


def distance_to_bottom(scroll_offset: float, viewport_height: float, content_height: float) -> float:
    """Return how far the viewport's bottom edge is from the end of the content."""
    return max(0.0, content_height - (scroll_offset + viewport_height))


@dataclass(slots=True)
class ScrollMonitor:
    """Decides when a scroll position should request the next page.

    Units are whatever the caller measures in (pixels, terminal rows);
    ``threshold`` must use the same unit.
    """

    threshold: float = SCROLL_THRESHOLD

    def near_bottom(
        self, scroll_offset: float, viewport_height: float, content_height: float
    ) -> bool:
        return distance_to_bottom(scroll_offset, viewport_height, content_height) <= self.threshold

    def should_request_next_page(
        self,
        *,
        scroll_offset: float,
        viewport_height: float,
        content_height: float,
        loading: bool,
        page: int,
        total_pages: int,
    ) -> bool:
        if loading or page >= total_pages:
            return False
        return self.near_bottom(scroll_offset, viewport_height, content_height)


__all__ = ["ScrollMonitor", "distance_to_bottom"]
