"""Route planning failure taxonomy."""

from __future__ import annotations


class RoutePlanningError(Exception):
    """Base class for failures surfaced by the route engine."""

    category = "route_planning_error"
    default_message = "Route planning failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    def to_detail(self) -> dict:
        return {"category": self.category, "message": str(self)}


class InvalidSelection(RoutePlanningError):
    category = "invalid_selection"
    default_message = "Please select at least one customer."


class ProviderUnavailable(RoutePlanningError):
    category = "provider_unavailable"
    default_message = "The routing provider is not available yet. Please wait a moment and try again."


class DistanceLookupFailed(RoutePlanningError):
    category = "distance_lookup_failed"
    default_message = "Distance lookup failed. Please check the addresses and try again."


class RouteComputationFailed(RoutePlanningError):
    category = "routing_failed"
    default_message = "Routing failed. Please check the addresses and try again."


class ProviderStatusError(ValueError):
    """Raised by provider clients when the service answers with a non-OK status."""

    def __init__(self, status: str, message: str | None = None) -> None:
        self.status = status
        super().__init__(f"Provider returned status {status}" + (f": {message}" if message else ""))
