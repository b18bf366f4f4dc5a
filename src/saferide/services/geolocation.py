"""Device position lookup with substitution when geolocation is unavailable."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..models.domain import Coordinate

logger = logging.getLogger(__name__)


class GeolocationUnavailable(RuntimeError):
    """Device position could not be obtained (permission denied, timeout, unsupported)."""


class PositionProvider(Protocol):
    def current_position(self) -> Coordinate: ...


class ReportedPositionProvider:
    """Position reported by the client device, if it sent one."""

    def __init__(self, position: Optional[Coordinate], reason: str = "no device position reported") -> None:
        self.position = position
        self.reason = reason

    def current_position(self) -> Coordinate:
        if self.position is None:
            raise GeolocationUnavailable(self.reason)
        return self.position


def resolve_position(provider: PositionProvider, fallback: Coordinate) -> Coordinate:
    """Return the provider's position, or ``fallback`` when it cannot supply one."""
    try:
        return provider.current_position()
    except GeolocationUnavailable as exc:
        logger.warning(f"Geolocation unavailable ({exc}); using fallback position {fallback}")
        return fallback
