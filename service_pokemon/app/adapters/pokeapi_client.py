"""
Async PokeAPI client used by the Pokémon service.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from shared.errors import UpstreamBadResponseError, UpstreamUnavailableError
from shared.logging import get_logger


SERVICE_NAME = "pokeapi"


class PokeApiClient:
    """
    Thin client for the two upstream resources the proxy serves.

    Each fetch performs exactly one request with no retry. Transport failures
    and timeouts raise ``UpstreamUnavailableError``; non-2xx statuses and
    bodies that are not the expected JSON shape raise
    ``UpstreamBadResponseError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger("pokemon.upstream")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_entity(self, name: str) -> str:
        """Fetch one pokemon and return its JSON object as text."""
        response = await self._get(f"/pokemon/{quote(name, safe='')}")
        body = self._decode(response)
        if not isinstance(body, dict):
            raise UpstreamBadResponseError(
                SERVICE_NAME,
                "Expected a JSON object",
                details={"path": response.request.url.path},
            )
        return response.text

    async def fetch_list(self, limit: int) -> List[str]:
        """Fetch the first ``limit`` pokemon names in upstream order."""
        response = await self._get("/pokemon", params={"limit": limit})
        body = self._decode(response)

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            raise UpstreamBadResponseError(SERVICE_NAME, "Missing results list")

        names: List[str] = []
        for item in results[:limit]:
            name = item.get("name") if isinstance(item, dict) else None
            if not isinstance(name, str):
                raise UpstreamBadResponseError(SERVICE_NAME, "List entry without a name")
            names.append(name)
        return names

    async def _get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            self.logger.warning("Upstream request timed out", path=path, error=str(exc))
            raise UpstreamUnavailableError(SERVICE_NAME, "Request timed out", details={"path": path}) from exc
        except httpx.TransportError as exc:
            self.logger.warning("Upstream request failed", path=path, error=str(exc))
            raise UpstreamUnavailableError(SERVICE_NAME, str(exc) or "Transport error", details={"path": path}) from exc
        except httpx.HTTPError as exc:
            # Undecodable content encoding and other protocol-level failures
            self.logger.warning("Upstream response could not be read", path=path, error=str(exc))
            raise UpstreamBadResponseError(SERVICE_NAME, str(exc) or "Unreadable response", details={"path": path}) from exc

        if not response.is_success:
            self.logger.warning(
                "Upstream returned error status",
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamBadResponseError(
                SERVICE_NAME,
                f"Unexpected status {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )

        self.logger.debug("Upstream resource retrieved", path=path)
        return response

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return json.loads(response.text)
        except ValueError as exc:
            self.logger.warning("Upstream returned unparseable body", path=response.request.url.path)
            raise UpstreamBadResponseError(
                SERVICE_NAME,
                "Unparseable response body",
                details={"path": response.request.url.path},
            ) from exc
