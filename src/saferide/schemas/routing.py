"""Routing request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field, model_validator

from ..services.tiles import MAX_ZOOM, validate_tile


# ---------------------------------------------------------------------------
# Backend wire format (GraphHopper-compatible)
# ---------------------------------------------------------------------------


class LineStringModel(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[Tuple[float, float]] = Field(..., min_length=2)


class InstructionModel(BaseModel):
    distance: float = Field(..., ge=0)
    sign: int
    interval: Tuple[int, int]
    text: str = ""
    time: float = Field(..., ge=0)
    street_name: str = ""
    street_ref: Optional[str] = None
    heading: Optional[float] = None
    last_heading: Optional[float] = None

    @model_validator(mode="after")
    def _check_interval(self) -> "InstructionModel":
        start, end = self.interval
        if start < 0 or end < start:
            raise ValueError(f"Invalid instruction interval {list(self.interval)}.")
        return self


class PathModel(BaseModel):
    distance: float = Field(..., ge=0)
    time: float = Field(..., ge=0)
    points: LineStringModel
    instructions: List[InstructionModel] = Field(..., min_length=1)
    bbox: Optional[Tuple[float, float, float, float]] = None
    weight: Optional[float] = None
    ascend: Optional[float] = None
    descend: Optional[float] = None

    @model_validator(mode="after")
    def _check_intervals_fit(self) -> "PathModel":
        # one-past-end is tolerated
        limit = len(self.points.coordinates)
        previous_start = 0
        for instruction in self.instructions:
            start, end = instruction.interval
            if end > limit:
                raise ValueError(f"Instruction interval {list(instruction.interval)} exceeds {limit} coordinates.")
            if start < previous_start:
                raise ValueError("Instructions must be ordered by interval start.")
            previous_start = start
        return self


class WrappedPathsModel(BaseModel):
    paths: List[PathModel] = Field(default_factory=list)


class RainTileModel(BaseModel):
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    zoom: int = Field(..., ge=0, le=MAX_ZOOM)

    @model_validator(mode="after")
    def _check_in_grid(self) -> "RainTileModel":
        validate_tile(self.x, self.y, self.zoom)
        return self


class RouteResponseModel(BaseModel):
    """Body returned by the routing backend and by the bundled sample file."""

    paths: Optional[List[PathModel]] = None
    response: Optional[WrappedPathsModel] = None
    rain_tile_list: List[RainTileModel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("rain_tile_list", "rainTiles"),
    )

    @model_validator(mode="after")
    def _require_path(self) -> "RouteResponseModel":
        if not self.all_paths():
            raise ValueError("Route response contains no paths.")
        return self

    def all_paths(self) -> List[PathModel]:
        if self.paths:
            return self.paths
        if self.response and self.response.paths:
            return self.response.paths
        return []


# ---------------------------------------------------------------------------
# API schemas
# ---------------------------------------------------------------------------


class CoordinateModel(BaseModel):
    lng: float = Field(..., ge=-180, le=180)
    lat: float = Field(..., ge=-90, le=90)


class InstructionOut(BaseModel):
    interval: Tuple[int, int]
    sign: int
    distance: float
    time: float
    text: str
    street_name: str
    street_ref: Optional[str] = None


class RoutePathOut(BaseModel):
    coordinates: List[Tuple[float, float]]
    distance: float
    time: float
    instructions: List[InstructionOut]
    rain_tiles: List[RainTileModel]
    source: str


class RouteSummary(BaseModel):
    formatted_time: str
    formatted_distance: str
    crosses_rain: bool
    source: str


class RouteResponse(BaseModel):
    route: RoutePathOut
    rain_overlay: Dict[str, Any]
    summary: RouteSummary


class RainOverlayRequest(BaseModel):
    tiles: List[RainTileModel] = Field(default_factory=list)
