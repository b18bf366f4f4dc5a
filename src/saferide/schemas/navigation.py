"""Navigation session request/response schemas."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, Field

from .routing import CoordinateModel, RoutePathOut, RouteSummary


class NavigationSessionRequest(BaseModel):
    end: Optional[CoordinateModel] = Field(
        default=None,
        description="Destination; the configured default destination is used when omitted.",
    )
    start: Optional[CoordinateModel] = Field(
        default=None,
        description="Fallback start used when the device position is unavailable.",
    )
    device_position: Optional[CoordinateModel] = Field(
        default=None,
        description="Current device position; preferred over 'start' when present.",
    )
    rain_avoidance: bool = True


class NavigationStateModel(BaseModel):
    status: str
    coordinate_index: int
    instruction_index: int
    progress_percent: float
    remaining_time: float
    remaining_distance: float
    distance_to_next_instruction: float
    is_complete: bool
    position: Optional[Tuple[float, float]] = None
    formatted_remaining_time: str
    formatted_remaining_distance: str
    formatted_distance_to_next: str


class NavigationSessionResponse(BaseModel):
    session_id: str
    route: RoutePathOut
    summary: RouteSummary
    state: NavigationStateModel
