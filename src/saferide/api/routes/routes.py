"""Route lookup endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.routing import RouteResponse
from ...services.outputs.formatter import route_summary, route_to_model
from ...services.routing import RouteAcquisition, RouteUnreachable
from ...services.tiles import rain_tiles_to_feature_collection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.get("", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def get_route(
    start_lng: float = Query(..., ge=-180, le=180),
    start_lat: float = Query(..., ge=-90, le=90),
    end_lng: float = Query(..., ge=-180, le=180),
    end_lat: float = Query(..., ge=-90, le=90),
    rain_avoidance: bool = Query(default=False, description="Route around rain cells."),
) -> RouteResponse:
    """Fetch a route, degrading to the bundled or synthesized route if the backend is down."""
    try:
        route = await RouteAcquisition().get_route(start_lng, start_lat, end_lng, end_lat, rain_avoidance)
    except RouteUnreachable as exc:
        logger.info(f"No viable route: {exc}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=RouteUnreachable.user_message) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error fetching route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch route: {str(exc)}",
        ) from exc

    return RouteResponse(
        route=route_to_model(route),
        rain_overlay=rain_tiles_to_feature_collection(route.rain_tiles),
        summary=route_summary(route),
    )
