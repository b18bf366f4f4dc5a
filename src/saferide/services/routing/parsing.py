"""Conversion from backend route payloads to domain objects."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ...models.domain import Instruction, RainTile, RoutePath
from ...schemas.routing import RouteResponseModel
from .errors import TransientFetchFailure


def parse_route_payload(data: Any, *, source: str = "backend") -> RoutePath:
    """Validate a GraphHopper-shaped body and return its first path.

    Raises:
        TransientFetchFailure: when the body does not describe a usable route.
    """
    try:
        model = RouteResponseModel.model_validate(data)
    except ValidationError as exc:
        raise TransientFetchFailure(f"Malformed route payload: {exc.error_count()} validation error(s).") from exc

    path = model.all_paths()[0]
    instructions = tuple(
        Instruction(
            interval_start=item.interval[0],
            interval_end=item.interval[1],
            sign=item.sign,
            distance=item.distance,
            time=item.time,
            text=item.text,
            street_name=item.street_name,
            street_ref=item.street_ref,
        )
        for item in path.instructions
    )
    return RoutePath(
        coordinates=tuple((lng, lat) for lng, lat in path.points.coordinates),
        distance=path.distance,
        time=path.time,
        instructions=instructions,
        rain_tiles=tuple(RainTile(x=tile.x, y=tile.y, zoom=tile.zoom) for tile in model.rain_tile_list),
        source=source,
    )
