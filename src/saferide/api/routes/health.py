"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_backend_client():
    """Lazy import to avoid startup failures."""
    from ...services.routing.backend_client import RoutingBackendClient
    return RoutingBackendClient()


@router.get("/health/routing", status_code=status.HTTP_200_OK)
async def health_routing() -> dict:
    """Check that the routing backend answers."""
    try:
        client = _get_backend_client()
        status_flag = await client.check_health()
        return {"service": "routing", "url": client.base_url, "healthy": status_flag}
    except Exception as e:
        return {"service": "routing", "healthy": False, "error": str(e)}
