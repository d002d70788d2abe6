"""Async HTTP client for the Poly Pizza REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import Settings
from core.errors import DecodeError, TransportError, UpstreamError

logger = logging.getLogger(__name__)


class PolyPizzaClient:
    """Thin GET-only wrapper around ``httpx.AsyncClient``.

    The auth header is fixed at construction. No retries and no timeout
    override: whatever httpx does by default applies.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        headers = {"Content-Type": "application/json"}
        if settings.auth_token:
            headers["x-auth-token"] = settings.auth_token
        self._http = httpx.AsyncClient(
            base_url=settings.base_url,
            headers=headers,
            transport=transport,
        )

    async def get(self, endpoint: str) -> Any:
        """GET *endpoint* (path plus optional query) and return the decoded JSON body."""
        try:
            response = await self._http.get(endpoint)
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        logger.debug("GET %s → %d", endpoint, response.status_code)
        if not response.is_success:
            raise UpstreamError(response.status_code, response.reason_phrase)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Invalid JSON in response: {e}") from e

    async def aclose(self) -> None:
        await self._http.aclose()
