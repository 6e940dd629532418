"""OMDb search service: one page fetch per call."""

from __future__ import annotations

import logging

import httpx

from movie_house.models import OMDB_API_URL, FetchRequest, SearchOutcome
from movie_house.parsing import build_search_params, parse_search_payload

logger = logging.getLogger(__name__)

OMDB_USER_AGENT = "movie-house/1.0"


class MetadataTransportError(RuntimeError):
    """The lookup could not complete (network, HTTP status, timeout, bad payload)."""


async def fetch_page(
    *,
    client: httpx.AsyncClient | None,
    request: FetchRequest,
    api_key: str,
    timeout_seconds: float,
    base_url: str = OMDB_API_URL,
) -> SearchOutcome:
    """Fetch a single page of OMDb search results.

    Raises:
        MetadataTransportError: For every failure that is not a valid
            ``Response: "False"`` answer from the service.
    """
    params = build_search_params(request, api_key)
    headers = {"User-Agent": OMDB_USER_AGENT}
    try:
        if client is not None:
            response = await client.get(
                base_url,
                params=params,
                headers=headers,
                timeout=timeout_seconds,
            )
        else:
            async with httpx.AsyncClient() as tmp_client:
                response = await tmp_client.get(
                    base_url,
                    params=params,
                    headers=headers,
                    timeout=timeout_seconds,
                )
        response.raise_for_status()
        return parse_search_payload(response.json())
    except httpx.HTTPStatusError as exc:
        raise MetadataTransportError(
            f"OMDb returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.TimeoutException as exc:
        raise MetadataTransportError(f"OMDb did not answer within {timeout_seconds}s") from exc
    except (httpx.HTTPError, OSError) as exc:
        raise MetadataTransportError(f"OMDb request failed: {exc}") from exc
    except ValueError as exc:
        # Covers both undecodable JSON and non-search payloads
        raise MetadataTransportError(str(exc) or "Malformed OMDb response") from exc


__all__ = ["MetadataTransportError", "OMDB_USER_AGENT", "fetch_page"]
