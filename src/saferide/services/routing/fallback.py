"""Route acquisition strategies, evaluated in order until one yields a route."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ...models.domain import Instruction, InstructionSign, RoutePath
from ..geospatial import distance
from ..rounding import round_half_up
from .backend_client import RoutingBackendClient
from .errors import TransientFetchFailure
from .parsing import parse_route_payload

logger = logging.getLogger(__name__)

# Shares of the synthesized route assigned to the two travel instructions.
PRIMARY_LEG_SHARE = 0.8
SECONDARY_LEG_SHARE = 0.2


@dataclass(frozen=True, slots=True)
class RouteRequest:
    start_lng: float
    start_lat: float
    end_lng: float
    end_lat: float
    rain_avoidance: bool = False


class RouteStrategy(ABC):
    """Contract for one link of the acquisition chain.

    Implementations raise ``TransientFetchFailure`` to hand over to the next
    strategy; any other exception propagates to the caller.
    """

    name: str = "strategy"

    @abstractmethod
    async def fetch(self, request: RouteRequest) -> RoutePath:
        raise NotImplementedError


class BackendRouteStrategy(RouteStrategy):
    name = "backend"

    def __init__(self, client: RoutingBackendClient) -> None:
        self.client = client

    async def fetch(self, request: RouteRequest) -> RoutePath:
        payload = await self.client.fetch_route(
            request.start_lng,
            request.start_lat,
            request.end_lng,
            request.end_lat,
            request.rain_avoidance,
        )
        return parse_route_payload(payload, source=self.name)


class SampleRouteStrategy(RouteStrategy):
    """Returns the bundled reference route verbatim, ignoring the requested endpoints."""

    name = "sample"

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch(self, request: RouteRequest) -> RoutePath:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            raise TransientFetchFailure(f"Failed to load sample route from {self.path}: {exc}") from exc
        logger.info(f"Using bundled sample route from {self.path}")
        return parse_route_payload(payload, source=self.name)


class MinimalRouteStrategy(RouteStrategy):
    """Synthesizes a straight start-midpoint-end route; never fails."""

    name = "minimal"

    def __init__(self, speed_mps: float) -> None:
        if speed_mps <= 0:
            raise ValueError("Fallback speed must be positive.")
        self.speed_mps = speed_mps

    async def fetch(self, request: RouteRequest) -> RoutePath:
        logger.info("Synthesizing minimal route between requested endpoints")
        return build_minimal_route(
            request.start_lng,
            request.start_lat,
            request.end_lng,
            request.end_lat,
            speed_mps=self.speed_mps,
        )


def build_minimal_route(
    start_lng: float,
    start_lat: float,
    end_lng: float,
    end_lat: float,
    *,
    speed_mps: float = 8.33,
) -> RoutePath:
    """Build a structurally valid three-point route between two coordinates.

    Total time assumes a constant ``speed_mps`` and is expressed in
    milliseconds. Distance and time are split 80/20 between the two travel
    instructions, followed by a zero-length arrival instruction.
    """
    total_distance = distance(start_lat, start_lng, end_lat, end_lng)
    total_time = round_half_up(total_distance / speed_mps * 1000)

    coordinates = (
        (start_lng, start_lat),
        ((start_lng + end_lng) / 2, (start_lat + end_lat) / 2),
        (end_lng, end_lat),
    )
    instructions = (
        Instruction(
            interval_start=0,
            interval_end=1,
            sign=InstructionSign.CONTINUE,
            distance=total_distance * PRIMARY_LEG_SHARE,
            time=round_half_up(total_time * PRIMARY_LEG_SHARE),
            text="Head toward the destination",
            street_name="Main Street",
        ),
        Instruction(
            interval_start=1,
            interval_end=2,
            sign=InstructionSign.TURN_RIGHT,
            distance=total_distance * SECONDARY_LEG_SHARE,
            time=round_half_up(total_time * SECONDARY_LEG_SHARE),
            text="Turn right toward the destination",
            street_name="Destination Street",
        ),
        Instruction(
            interval_start=2,
            interval_end=2,
            sign=InstructionSign.ARRIVE,
            distance=0,
            time=0,
            text="Arrive at the destination",
        ),
    )
    return RoutePath(
        coordinates=coordinates,
        distance=total_distance,
        time=total_time,
        instructions=instructions,
        source=MinimalRouteStrategy.name,
    )
