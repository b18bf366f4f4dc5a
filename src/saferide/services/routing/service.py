"""Route acquisition orchestration: backend first, then the fallback chain."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import RoutePath
from .backend_client import RoutingBackendClient
from .errors import TransientFetchFailure
from .fallback import (
    BackendRouteStrategy,
    MinimalRouteStrategy,
    RouteRequest,
    RouteStrategy,
    SampleRouteStrategy,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RouteAcquisitionConfig:
    """Explicit settings for RouteAcquisition; defaults come from ``Settings``."""

    base_url: str = field(default_factory=lambda: settings.routing_api_url)
    rain_avoiding_endpoint: str = field(default_factory=lambda: settings.rain_avoiding_endpoint)
    direct_endpoint: str = field(default_factory=lambda: settings.direct_endpoint)
    timeout_seconds: float = field(default_factory=lambda: settings.request_timeout_seconds)
    connect_timeout_seconds: float = field(default_factory=lambda: settings.connect_timeout_seconds)
    sample_route_file: Path = field(default_factory=lambda: settings.sample_route_file)
    fallback_speed_mps: float = field(default_factory=lambda: settings.fallback_speed_mps)


def default_strategies(
    config: RouteAcquisitionConfig, transport: httpx.AsyncBaseTransport | None = None
) -> list[RouteStrategy]:
    client = RoutingBackendClient(
        base_url=config.base_url,
        rain_avoiding_endpoint=config.rain_avoiding_endpoint,
        direct_endpoint=config.direct_endpoint,
        timeout=config.timeout_seconds,
        connect_timeout=config.connect_timeout_seconds,
        transport=transport,
    )
    return [
        BackendRouteStrategy(client),
        SampleRouteStrategy(config.sample_route_file),
        MinimalRouteStrategy(config.fallback_speed_mps),
    ]


class RouteAcquisition:
    """Produces a RoutePath, degrading through an ordered list of strategies.

    ``RouteUnreachable`` raised by any strategy propagates unchanged; only
    ``TransientFetchFailure`` moves evaluation on to the next strategy.
    """

    def __init__(
        self,
        config: RouteAcquisitionConfig | None = None,
        strategies: Sequence[RouteStrategy] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or RouteAcquisitionConfig()
        self.strategies = list(strategies) if strategies is not None else default_strategies(self.config, transport)
        if not self.strategies:
            raise ValueError("At least one route strategy is required.")

    async def get_route(
        self,
        start_lng: float,
        start_lat: float,
        end_lng: float,
        end_lat: float,
        rain_avoidance: bool = False,
    ) -> RoutePath:
        request = RouteRequest(start_lng, start_lat, end_lng, end_lat, rain_avoidance)
        last_error: TransientFetchFailure | None = None
        for strategy in self.strategies:
            try:
                route = await strategy.fetch(request)
            except TransientFetchFailure as exc:
                logger.warning(f"Route strategy '{strategy.name}' failed, falling back: {exc}")
                last_error = exc
                continue
            logger.info(
                f"Route acquired via '{strategy.name}': {len(route.coordinates)} points, "
                f"{route.distance:.0f} m, {len(route.rain_tiles)} rain tiles"
            )
            return route
        raise TransientFetchFailure("Every route strategy failed.") from last_error
