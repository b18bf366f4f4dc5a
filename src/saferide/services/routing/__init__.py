"""Route acquisition services."""

from .errors import RouteAcquisitionError, RouteUnreachable, TransientFetchFailure
from .fallback import build_minimal_route
from .service import RouteAcquisition, RouteAcquisitionConfig

__all__ = [
    "RouteAcquisition",
    "RouteAcquisitionConfig",
    "RouteAcquisitionError",
    "RouteUnreachable",
    "TransientFetchFailure",
    "build_minimal_route",
]
