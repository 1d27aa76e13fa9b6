"""Stop ordering strategies: furthest-first out-and-back and provider-optimized round trip."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from ...models.domain import OUT_AND_BACK, ROUND_TRIP, Customer, Destination, Itinerary
from ..address import resolve_address
from .errors import DistanceLookupFailed, RouteComputationFailed
from .maps_client import RoutingProvider
from .models import DirectionsResult, RouteLeg

METERS_PER_MILE = 1609.34

logger = logging.getLogger(__name__)


def meters_to_miles(meters: float) -> str:
    """Miles with exactly one decimal, halves rounded up."""
    miles = Decimal(meters / METERS_PER_MILE)
    return str(miles.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def seconds_to_minutes(seconds: float) -> int:
    return int(math.floor(seconds / 60 + 0.5))


def summarize_legs(legs: Iterable[RouteLeg]) -> tuple[str, int]:
    total_meters = 0.0
    total_seconds = 0.0
    for leg in legs:
        total_meters += leg.distance_meters
        total_seconds += leg.duration_seconds
    return meters_to_miles(total_meters), seconds_to_minutes(total_seconds)


def build_destinations(customers: Sequence[Customer], selected_ids: Iterable[str]) -> list[Destination]:
    """One destination per selected active customer, in customer-list order.

    Ids that match no customer are skipped.
    """
    wanted = set(selected_ids)
    return [
        Destination(customer=customer, address=resolve_address(customer))
        for customer in customers
        if customer.active and customer.id in wanted
    ]


def sort_by_distance(destinations: Sequence[Destination]) -> list[Destination]:
    """Furthest first. Equal distances keep their input order."""
    return sorted(destinations, key=lambda destination: -destination.distance_from_home_meters)


def _request_route(
    provider: RoutingProvider,
    origin: str,
    destination: str,
    waypoints: Sequence[str],
    optimize: bool,
) -> DirectionsResult:
    try:
        return provider.route(origin, destination, waypoints, optimize=optimize)
    except Exception as exc:
        logger.warning(f"Route request failed ({len(waypoints)} waypoints, optimize={optimize}): {exc}")
        raise RouteComputationFailed() from exc


def plan_out_and_back(
    home_address: str,
    destinations: Sequence[Destination],
    provider: RoutingProvider,
) -> Itinerary:
    """Visit the furthest customer first and work back toward home.

    The stop closest to home becomes the route's final destination; every other
    stop is passed as a fixed waypoint in descending-distance order.
    """
    try:
        distances = provider.distance_matrix(home_address, [d.address for d in destinations])
    except Exception as exc:
        logger.warning(f"Distance lookup from '{home_address}' failed: {exc}")
        raise DistanceLookupFailed() from exc

    measured = [
        Destination(
            customer=destination.customer,
            address=destination.address,
            distance_from_home_meters=(distances[index] if index < len(distances) else None) or 0,
        )
        for index, destination in enumerate(destinations)
    ]
    ordered = sort_by_distance(measured)

    directions = _request_route(
        provider,
        home_address,
        ordered[-1].address,
        [d.address for d in ordered[:-1]],
        optimize=False,
    )
    total_miles, total_minutes = summarize_legs(directions.legs)
    return Itinerary(
        mode=OUT_AND_BACK,
        ordered_customers=tuple(d.customer for d in ordered),
        total_distance_miles=total_miles,
        total_time_minutes=total_minutes,
        legs=tuple(directions.legs),
    )


def _validate_waypoint_order(order: Sequence[int] | None, count: int) -> list[int]:
    if order is None:
        return list(range(count))
    order = list(order)
    if sorted(order) != list(range(count)):
        raise RouteComputationFailed(f"Provider returned an invalid waypoint order: {order}")
    return order


def plan_round_trip(
    home_address: str,
    destinations: Sequence[Destination],
    provider: RoutingProvider,
) -> Itinerary:
    """Single loop from home back to home, stop order chosen by the provider."""
    directions = _request_route(
        provider,
        home_address,
        home_address,
        [d.address for d in destinations],
        optimize=True,
    )
    order = _validate_waypoint_order(directions.waypoint_order, len(destinations))
    total_miles, total_minutes = summarize_legs(directions.legs)
    return Itinerary(
        mode=ROUND_TRIP,
        ordered_customers=tuple(destinations[index].customer for index in order),
        total_distance_miles=total_miles,
        total_time_minutes=total_minutes,
        legs=tuple(directions.legs),
    )


STRATEGIES = {
    OUT_AND_BACK: plan_out_and_back,
    ROUND_TRIP: plan_round_trip,
}
