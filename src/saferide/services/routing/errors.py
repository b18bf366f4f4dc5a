"""Route acquisition error taxonomy."""

from __future__ import annotations


class RouteAcquisitionError(RuntimeError):
    pass


class RouteUnreachable(RouteAcquisitionError):
    """The backend determined that no viable path exists (HTTP 400).

    Always surfaced to the caller, never replaced by a fallback route.
    """

    user_message = (
        "No route could be found. The start or destination may be in rain, "
        "the route may leave the country, or there is no road to the destination."
    )


class TransientFetchFailure(RouteAcquisitionError):
    """Network error, timeout, unexpected status or malformed body; recovered by fallback."""
