"""Tests for the OMDb fetch service."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from movie_house.models import OMDB_API_URL, FetchRequest, SearchFilters
from movie_house.services.omdb_service import (
    OMDB_USER_AGENT,
    MetadataTransportError,
    fetch_page,
)


def _response(payload) -> MagicMock:
    response = MagicMock()
    response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    return response


@pytest.mark.asyncio
async def test_fetch_page_uses_shared_client(make_payload) -> None:
    request = FetchRequest("batman", page=2, filters=SearchFilters("movie", "2005"))
    response = _response(make_payload(count=10, total=42))
    client = SimpleNamespace(get=AsyncMock(return_value=response))

    outcome = await fetch_page(client=client, request=request, api_key="KEY", timeout_seconds=10)

    assert outcome.ok is True
    assert len(outcome.items) == 10
    client.get.assert_awaited_once_with(
        OMDB_API_URL,
        params={"apikey": "KEY", "s": "batman", "page": 2, "type": "movie", "y": "2005"},
        headers={"User-Agent": OMDB_USER_AGENT},
        timeout=10,
    )
    response.raise_for_status.assert_called_once()


@pytest.mark.asyncio
async def test_fetch_page_without_shared_client_uses_temp_client(make_payload) -> None:
    response = _response(make_payload(count=3))

    class DummyClient:
        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, *_args, **_kwargs):
            return response

    with patch(
        "movie_house.services.omdb_service.httpx.AsyncClient", return_value=DummyClient()
    ):
        outcome = await fetch_page(
            client=None, request=FetchRequest("batman"), api_key="KEY", timeout_seconds=5
        )

    assert len(outcome.items) == 3
    response.raise_for_status.assert_called_once()


@pytest.mark.asyncio
async def test_negative_response_is_not_a_transport_error() -> None:
    response = _response({"Response": "False", "Error": "Movie not found!"})
    client = SimpleNamespace(get=AsyncMock(return_value=response))

    outcome = await fetch_page(
        client=client, request=FetchRequest("zzzzzznotfound"), api_key="KEY", timeout_seconds=5
    )

    assert outcome.ok is False
    assert outcome.error == "Movie not found!"


@pytest.mark.asyncio
async def test_http_status_error_maps_to_transport_error() -> None:
    request = httpx.Request("GET", OMDB_API_URL)
    failed = httpx.Response(401, request=request)
    response = MagicMock()
    response.raise_for_status = MagicMock(
        side_effect=httpx.HTTPStatusError("unauthorized", request=request, response=failed)
    )
    client = SimpleNamespace(get=AsyncMock(return_value=response))

    with pytest.raises(MetadataTransportError, match="HTTP 401"):
        await fetch_page(client=client, request=FetchRequest("x"), api_key="bad", timeout_seconds=5)


@pytest.mark.asyncio
async def test_timeout_maps_to_transport_error() -> None:
    client = SimpleNamespace(get=AsyncMock(side_effect=httpx.ReadTimeout("slow")))

    with pytest.raises(MetadataTransportError, match="within 7s"):
        await fetch_page(client=client, request=FetchRequest("x"), api_key="K", timeout_seconds=7)


@pytest.mark.asyncio
async def test_connect_error_maps_to_transport_error() -> None:
    client = SimpleNamespace(get=AsyncMock(side_effect=httpx.ConnectError("refused")))

    with pytest.raises(MetadataTransportError, match="request failed") as excinfo:
        await fetch_page(client=client, request=FetchRequest("x"), api_key="K", timeout_seconds=5)

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_invalid_json_maps_to_transport_error() -> None:
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json = MagicMock(side_effect=ValueError("Expecting value"))
    client = SimpleNamespace(get=AsyncMock(return_value=response))

    with pytest.raises(MetadataTransportError):
        await fetch_page(client=client, request=FetchRequest("x"), api_key="K", timeout_seconds=5)


@pytest.mark.asyncio
async def test_non_search_payload_maps_to_transport_error() -> None:
    client = SimpleNamespace(get=AsyncMock(return_value=_response({"Title": "Batman"})))

    with pytest.raises(MetadataTransportError, match="Malformed"):
        await fetch_page(client=client, request=FetchRequest("x"), api_key="K", timeout_seconds=5)
