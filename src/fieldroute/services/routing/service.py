"""Route planning orchestration: request validation, strategy dispatch and planner state."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ...config import settings
from ...models.domain import (
    ALL,
    ROUTE_MODES,
    Customer,
    FilterState,
    Itinerary,
    RouteMode,
    RouteRequest,
    SavedRoute,
)
from ...persistence.saved_routes import Confirm, SavedRouteStore
from .. import selection
from .errors import InvalidSelection, ProviderUnavailable, RoutePlanningError
from .maps_client import RoutingProvider
from .strategies import STRATEGIES, build_destinations

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


def compute_route(
    request: RouteRequest,
    customers: Sequence[Customer],
    provider: Optional[RoutingProvider],
) -> Itinerary:
    """Order the selected customers according to ``request.mode``.

    Raises :class:`InvalidSelection` before any provider call when nothing routable
    is selected, and :class:`ProviderUnavailable` when no provider is supplied.
    """
    if not request.selected_customer_ids:
        raise InvalidSelection()
    if request.mode not in STRATEGIES:
        raise ValueError(f"Unknown route mode '{request.mode}'.")
    if not (request.home_address or "").strip():
        raise ValueError("Home address is required.")
    if provider is None:
        raise ProviderUnavailable()

    destinations = build_destinations(customers, request.selected_customer_ids)
    if not destinations:
        raise InvalidSelection("None of the selected customers are active customers on file.")
    skipped = len(request.selected_customer_ids) - len(destinations)
    if skipped:
        logger.info(f"Skipping {skipped} selected ids with no matching active customer")

    strategy = STRATEGIES[request.mode]
    itinerary = strategy(request.home_address, destinations, provider)
    logger.info(
        f"Computed {request.mode} route: {len(itinerary.ordered_customers)} stops, "
        f"{itinerary.total_distance_miles} mi, {itinerary.total_time_minutes} min"
    )
    return itinerary


class PlannerSession:
    """Mutable planning state for one user.

    Holds the working :class:`RouteRequest` and the last successfully computed
    :class:`Itinerary`. User interaction goes through the injected ``notify``
    callable; destructive actions take a ``confirm`` callable.
    """

    def __init__(
        self,
        store: SavedRouteStore,
        provider_factory: Callable[[], RoutingProvider],
        notify: Optional[Notify] = None,
        home_address: str | None = None,
    ) -> None:
        self.store = store
        self.provider_factory = provider_factory
        self.notify = notify or (lambda message: None)
        self.request = RouteRequest(home_address=home_address or settings.default_home_address)
        self.itinerary: Optional[Itinerary] = None

    @property
    def filters(self) -> FilterState:
        return self.request.filters

    def set_home_address(self, home_address: str) -> None:
        self.request = replace(self.request, home_address=home_address)

    def set_mode(self, mode: RouteMode) -> None:
        if mode not in ROUTE_MODES:
            raise ValueError(f"Unknown route mode '{mode}'.")
        self.request = replace(self.request, mode=mode)

    def set_state_filter(self, state: str) -> None:
        self.request = replace(self.request, filters=selection.change_state(self.filters, state))

    def set_city_filter(self, city: str) -> None:
        self.request = replace(self.request, filters=self.filters.with_city(city))

    def set_stage_filter(self, stage: str) -> None:
        self.request = replace(self.request, filters=self.filters.with_stage(stage))

    def clear_filters(self) -> None:
        self.request = replace(self.request, filters=FilterState(ALL, ALL, ALL))

    def visible_customers(self, customers: Sequence[Customer]) -> list[Customer]:
        return selection.apply_filters(customers, self.filters)

    def toggle(self, customer_id: str) -> None:
        selected = selection.toggle_selection(self.request.selected_customer_ids, customer_id)
        self.request = replace(self.request, selected_customer_ids=selected)

    def select_all_in_state(self, customers: Sequence[Customer], state: str) -> None:
        selected = selection.select_all_in_group(self.request.selected_customer_ids, customers, state)
        self.request = replace(self.request, selected_customer_ids=selected)

    def clear_selection(self) -> None:
        self.request = replace(self.request, selected_customer_ids=selection.clear_selection())

    def compute(self, customers: Sequence[Customer]) -> Itinerary:
        """Compute a route for the current request.

        On failure the previous itinerary and the request are left as they were.
        """
        try:
            provider = self.provider_factory() if self.request.selected_customer_ids else None
            itinerary = compute_route(self.request, customers, provider)
        except RoutePlanningError as exc:
            self.notify(str(exc))
            raise
        self.itinerary = itinerary
        return itinerary

    def save(self, name: str) -> SavedRoute:
        try:
            saved = self.store.save(name, self.request)
        except ValueError as exc:
            self.notify(str(exc))
            raise
        self.notify(f'Route "{saved.name}" saved!')
        return saved

    def load(self, route_id: str) -> RouteRequest:
        saved = self.store.get(route_id)
        self.request = saved.request
        self.itinerary = None
        self.notify(f"Loaded route: {saved.name}")
        return self.request

    def delete(self, route_id: str, confirm: Confirm) -> bool:
        return self.store.delete(route_id, confirm)
