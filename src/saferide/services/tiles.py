"""Slippy-tile geometry and rain overlay utilities."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List

from shapely.geometry import LineString, Polygon
from shapely.ops import unary_union

from ..models.domain import Coordinate, RainTile, RoutePath


MAX_ZOOM = 30


def _validate_zoom(z: int) -> None:
    if not 0 <= z <= MAX_ZOOM:
        raise ValueError(f"Tile zoom must be between 0 and {MAX_ZOOM}, got {z}.")


def validate_tile(x: int, y: int, z: int) -> None:
    """Raise ValueError unless (x, y) is a tile index that exists at zoom ``z``."""

    _validate_zoom(z)
    size = 2**z
    if not (0 <= x < size and 0 <= y < size):
        raise ValueError(f"Tile ({x}, {y}) is outside the {size}x{size} grid at zoom {z}.")


def tile_to_lon_lat(x: int, y: int, z: int) -> Coordinate:
    """Convert the north-west corner of tile (x, y, z) to (longitude, latitude).

    Inverse Web-Mercator projection; passing ``x + 1`` / ``y + 1`` yields the
    opposite corners, which is what keeps neighbouring tiles edge-aligned.
    """

    _validate_zoom(z)
    size = 2**z
    if not (0 <= x <= size and 0 <= y <= size):
        raise ValueError(f"Tile corner ({x}, {y}) is outside the grid at zoom {z}.")
    n = float(size)
    lon_deg = x / n * 360.0 - 180.0
    lat_rad = math.atan(math.sinh(math.pi * (1 - 2 * y / n)))
    return lon_deg, math.degrees(lat_rad)


def tile_bounds_polygon(x: int, y: int, z: int) -> List[Coordinate]:
    """Closed ring NW, NE, SE, SW, NW for a tile."""

    validate_tile(x, y, z)
    west, north = tile_to_lon_lat(x, y, z)
    east, south = tile_to_lon_lat(x + 1, y + 1, z)
    return [
        (west, north),
        (east, north),
        (east, south),
        (west, south),
        (west, north),
    ]


def rain_tiles_to_feature_collection(tiles: Iterable[RainTile]) -> Dict[str, Any]:
    """Render rain tiles as a GeoJSON FeatureCollection of polygons.

    Duplicate tiles are kept and produce overlapping features.
    """

    features: List[Dict[str, Any]] = []
    for index, tile in enumerate(tiles):
        ring = tile_bounds_polygon(tile.x, tile.y, tile.zoom)
        features.append(
            {
                "type": "Feature",
                "id": index,
                "properties": {"tileX": tile.x, "tileY": tile.y, "zoom": tile.zoom},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[list(point) for point in ring]],
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}


def rain_coverage(tiles: Iterable[RainTile]):
    """Union of all rain tile polygons (an empty geometry when there are none)."""

    polygons = [Polygon(tile_bounds_polygon(tile.x, tile.y, tile.zoom)) for tile in tiles]
    return unary_union(polygons)


def route_crosses_rain(route: RoutePath) -> bool:
    """Return True if the route polyline touches any rain tile."""

    if not route.rain_tiles:
        return False
    coverage = rain_coverage(route.rain_tiles)
    return LineString(route.coordinates).intersects(coverage)
