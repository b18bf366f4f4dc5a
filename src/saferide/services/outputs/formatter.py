"""Utilities to serialize routes and navigation state for API responses."""

from __future__ import annotations

from ...models.domain import NavigationState, RoutePath
from ...schemas.navigation import NavigationStateModel
from ...schemas.routing import InstructionOut, RainTileModel, RoutePathOut, RouteSummary
from ..rounding import round_half_up
from ..tiles import route_crosses_rain


def format_time(milliseconds: float) -> str:
    total_seconds = int(milliseconds // 1000)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours}h {minutes}min"
    if minutes > 0:
        return f"{minutes}min"
    return f"{seconds}s"


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{round_half_up(meters)}m"


def route_to_model(route: RoutePath) -> RoutePathOut:
    return RoutePathOut(
        coordinates=list(route.coordinates),
        distance=route.distance,
        time=route.time,
        instructions=[
            InstructionOut(
                interval=(item.interval_start, item.interval_end),
                sign=int(item.sign),
                distance=item.distance,
                time=item.time,
                text=item.text,
                street_name=item.street_name,
                street_ref=item.street_ref,
            )
            for item in route.instructions
        ],
        rain_tiles=[RainTileModel(x=tile.x, y=tile.y, zoom=tile.zoom) for tile in route.rain_tiles],
        source=route.source,
    )


def route_summary(route: RoutePath) -> RouteSummary:
    return RouteSummary(
        formatted_time=format_time(route.time),
        formatted_distance=format_distance(route.distance),
        crosses_rain=route_crosses_rain(route),
        source=route.source,
    )


def navigation_state_to_model(state: NavigationState, status: str) -> NavigationStateModel:
    return NavigationStateModel(
        status=status,
        coordinate_index=state.coordinate_index,
        instruction_index=state.instruction_index,
        progress_percent=state.progress_percent,
        remaining_time=state.remaining_time,
        remaining_distance=state.remaining_distance,
        distance_to_next_instruction=state.distance_to_next_instruction,
        is_complete=state.is_complete,
        position=state.position,
        formatted_remaining_time=format_time(state.remaining_time),
        formatted_remaining_distance=format_distance(state.remaining_distance),
        formatted_distance_to_next=format_distance(state.distance_to_next_instruction),
    )
