"""Route group exports."""

from . import health, navigation, overlays, routes

__all__ = ["routes", "navigation", "overlays", "health"]
