"""Rain overlay endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, status

from ...models.domain import RainTile
from ...schemas.routing import RainOverlayRequest
from ...services.tiles import rain_tiles_to_feature_collection, tile_bounds_polygon

router = APIRouter(prefix="/overlays", tags=["overlays"])


@router.post("/rain", status_code=status.HTTP_200_OK)
def rain_overlay(payload: RainOverlayRequest) -> dict:
    tiles = [RainTile(x=tile.x, y=tile.y, zoom=tile.zoom) for tile in payload.tiles]
    return rain_tiles_to_feature_collection(tiles)


@router.get("/tiles/{z}/{x}/{y}", status_code=status.HTTP_200_OK)
def tile_polygon(
    z: int = Path(..., ge=0, le=30),
    x: int = Path(...),
    y: int = Path(...),
) -> dict:
    """Closed polygon ring (NW, NE, SE, SW, NW) for one slippy tile."""
    try:
        ring = tile_bounds_polygon(x, y, z)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"x": x, "y": y, "zoom": z, "coordinates": [list(point) for point in ring]}
