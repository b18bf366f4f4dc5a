"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..models.domain import Coordinate

EARTH_RADIUS_M = 6_371_000.0


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def coordinate_distance(a: Coordinate, b: Coordinate) -> float:
    """Distance in meters between two (lng, lat) coordinates."""

    return distance(a[1], a[0], b[1], b[0])


def path_length(coordinates: Sequence[Coordinate], start: int = 0, end: Optional[int] = None) -> float:
    """Length in meters of the polyline walked from index ``start`` to index ``end``.

    ``end`` is clamped to the last coordinate; an empty span has zero length.
    """

    last = len(coordinates) - 1
    stop = last if end is None else min(end, last)
    total = 0.0
    for index in range(max(start, 0), stop):
        total += coordinate_distance(coordinates[index], coordinates[index + 1])
    return total
