"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from movie_house.models import (
    OMDB_API_URL,
    OMDB_DEMO_API_KEY,
    REQUEST_TIMEOUT_SECONDS,
    FetchRequest,
    SearchOutcome,
)
from movie_house.services import omdb_service as _omdb


@runtime_checkable
class MetadataService(Protocol):
    """Interface for movie-metadata lookups used by the query controller."""

    async def search(self, request: FetchRequest) -> SearchOutcome:
        """Fetch one page of results.

        Raises ``MetadataTransportError`` when the lookup cannot complete.
        """
        ...


class DefaultMetadataService:
    """Default adapter that delegates to the function-based OMDb service.

    The HTTP client is resolved lazily through ``client_getter`` so the app
    can create its shared client on mount and close it on unmount.
    """

    def __init__(
        self,
        *,
        api_key: str = OMDB_DEMO_API_KEY,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        client_getter: Callable[[], httpx.AsyncClient | None] | None = None,
        base_url: str = OMDB_API_URL,
    ) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.base_url = base_url
        self._client_getter = client_getter or (lambda: None)

    async def search(self, request: FetchRequest) -> SearchOutcome:
        return await _omdb.fetch_page(
            client=self._client_getter(),
            request=request,
            api_key=self.api_key,
            timeout_seconds=self.timeout_seconds,
            base_url=self.base_url,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    metadata: MetadataService


def build_default_app_services(
    *,
    api_key: str = OMDB_DEMO_API_KEY,
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    client_getter: Callable[[], httpx.AsyncClient | None] | None = None,
) -> AppServices:
    """Build default app services backed by the function-based modules."""
    return AppServices(
        metadata=DefaultMetadataService(
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            client_getter=client_getter,
        ),
    )


__all__ = [
    "AppServices",
    "DefaultMetadataService",
    "MetadataService",
    "build_default_app_services",
]
