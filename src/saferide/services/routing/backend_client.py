"""HTTP client for the rain-aware routing backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from .errors import RouteUnreachable, TransientFetchFailure

logger = logging.getLogger(__name__)


class RoutingBackendClient:
    """Issues a single GET per route request; retries are deliberately absent."""

    def __init__(
        self,
        base_url: str | None = None,
        rain_avoiding_endpoint: str | None = None,
        direct_endpoint: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.routing_api_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Routing backend base URL is not configured.")
        self.rain_avoiding_endpoint = rain_avoiding_endpoint or settings.rain_avoiding_endpoint
        self.direct_endpoint = direct_endpoint or settings.direct_endpoint
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.connect_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=self._transport,
        )

    def build_url(
        self, start_lng: float, start_lat: float, end_lng: float, end_lat: float, rain_avoidance: bool
    ) -> str:
        endpoint = self.rain_avoiding_endpoint if rain_avoidance else self.direct_endpoint
        return f"{self.base_url}/{endpoint}/{start_lat},{start_lng}/{end_lat},{end_lng}"

    async def fetch_route(
        self,
        start_lng: float,
        start_lat: float,
        end_lng: float,
        end_lat: float,
        rain_avoidance: bool = False,
    ) -> Any:
        """Fetch the raw JSON route body.

        Raises:
            RouteUnreachable: backend answered 400 (no viable path).
            TransientFetchFailure: any other failure.
        """
        url = self.build_url(start_lng, start_lat, end_lng, end_lat, rain_avoidance)
        kind = "rain-avoiding" if rain_avoidance else "direct"
        logger.info(f"Fetching {kind} route from {url}")

        async with self._get_client() as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                raise TransientFetchFailure(
                    f"Routing backend at {self.base_url} unreachable: {type(exc).__name__}: {exc}"
                ) from exc

        if response.status_code == httpx.codes.BAD_REQUEST:
            raise RouteUnreachable(f"Routing backend reported no viable route (HTTP 400) for {url}.")
        if not response.is_success:
            raise TransientFetchFailure(f"Routing backend returned HTTP {response.status_code} for {url}.")

        try:
            return response.json()
        except ValueError as exc:
            raise TransientFetchFailure(f"Routing backend returned invalid JSON: {exc}") from exc

    async def check_health(self) -> bool:
        """Return True if the backend answers at all (any HTTP status below 500)."""
        url = f"{self.base_url}/"
        try:
            async with self._get_client() as client:
                response = await client.get(url)
        except httpx.HTTPError:
            return False
        return response.status_code < 500
