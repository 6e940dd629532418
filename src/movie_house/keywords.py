"""Fallback search terms for Discovery mode."""

from __future__ import annotations

import random

DISCOVERY_KEYWORDS: tuple[str, ...] = (
    "love",
    "hero",
    "life",
    "dark",
    "day",
    "moon",
    "star",
    "war",
    "girl",
    "boy",
)


class KeywordPicker:
    """Uniformly samples a keyword from a fixed vocabulary.

    Every Discovery-mode query goes through :meth:`pick`, so repeated
    Discovery fetches share a shape but not necessarily a term.
    """

    def __init__(
        self,
        vocabulary: tuple[str, ...] = DISCOVERY_KEYWORDS,
        rng: random.Random | None = None,
    ) -> None:
        if not vocabulary:
            raise ValueError("Keyword vocabulary must not be empty")
        self._vocabulary = tuple(vocabulary)
        self._rng = rng or random.Random()

    @property
    def vocabulary(self) -> tuple[str, ...]:
        return self._vocabulary

    def pick(self) -> str:
        return self._rng.choice(self._vocabulary)


__all__ = ["DISCOVERY_KEYWORDS", "KeywordPicker"]
