"""Domain models for routes and live navigation state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

# (longitude, latitude) in degrees, WGS84.
Coordinate = Tuple[float, float]


class InstructionSign(IntEnum):
    """Maneuver codes used by GraphHopper-compatible backends."""

    U_TURN_UNKNOWN = -98
    U_TURN_LEFT = -8
    KEEP_LEFT = -7
    LEAVE_ROUNDABOUT = -6
    TURN_SHARP_LEFT = -3
    TURN_LEFT = -2
    TURN_SLIGHT_LEFT = -1
    CONTINUE = 0
    TURN_SLIGHT_RIGHT = 1
    TURN_RIGHT = 2
    TURN_SHARP_RIGHT = 3
    ARRIVE = 4
    VIA_REACHED = 5
    USE_ROUNDABOUT = 6
    KEEP_RIGHT = 7
    U_TURN_RIGHT = 8


@dataclass(frozen=True, slots=True)
class Instruction:
    """One maneuver covering ``coordinates[interval_start:interval_end + 1]``."""

    interval_start: int
    interval_end: int
    sign: int
    distance: float
    time: float
    text: str = ""
    street_name: str = ""
    street_ref: Optional[str] = None

    def __post_init__(self) -> None:
        if self.interval_end < self.interval_start:
            raise ValueError(
                f"Instruction interval end ({self.interval_end}) precedes start ({self.interval_start})."
            )

    @property
    def is_arrival(self) -> bool:
        return self.sign == InstructionSign.ARRIVE


@dataclass(frozen=True, slots=True)
class RainTile:
    """Slippy-map tile flagged as containing precipitation."""

    x: int
    y: int
    zoom: int


@dataclass(frozen=True, slots=True)
class RoutePath:
    """A computed route: polyline, turn-by-turn instructions and totals."""

    coordinates: Tuple[Coordinate, ...]
    distance: float
    time: float
    instructions: Tuple[Instruction, ...]
    rain_tiles: Tuple[RainTile, ...] = ()
    source: str = "backend"


@dataclass(slots=True)
class NavigationState:
    """Live playback state owned by a single ProgressSimulator."""

    coordinate_index: int = 0
    instruction_index: int = 0
    progress_percent: float = 0.0
    remaining_time: float = 0
    remaining_distance: float = 0
    distance_to_next_instruction: float = 0.0
    is_complete: bool = False
    position: Optional[Coordinate] = None
