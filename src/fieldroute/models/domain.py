"""Domain models for customers, route requests and computed itineraries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

ALL = "All"
OUT_AND_BACK = "out-and-back"
ROUND_TRIP = "round-trip"

RouteMode = Literal["out-and-back", "round-trip"]
ROUTE_MODES: tuple[str, ...] = (OUT_AND_BACK, ROUND_TRIP)

LEAD_STAGES: tuple[str, ...] = ("Hot", "Warm", "Cold", "Lead", "Scouting")


@dataclass(slots=True)
class Contact:
    name: Optional[str] = None
    title: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(slots=True)
class Customer:
    """A CRM customer record, consumed read-only by the planner."""

    id: str
    name: str
    city: Optional[str]
    state: Optional[str]
    active: bool = True
    company: Optional[str] = None
    address: Optional[str] = None
    zip: Optional[str] = None
    lead_stage: Optional[str] = None
    primary_phone: Optional[str] = None
    contacts: list[Contact] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class FilterState:
    """State/city/stage filter triple. Changing the state always resets the city."""

    state: str = ALL
    city: str = ALL
    stage: str = ALL

    def with_state(self, state: str) -> "FilterState":
        return FilterState(state=state or ALL, city=ALL, stage=self.stage)

    def with_city(self, city: str) -> "FilterState":
        return FilterState(state=self.state, city=(city or ALL).strip() or ALL, stage=self.stage)

    def with_stage(self, stage: str) -> "FilterState":
        return FilterState(state=self.state, city=self.city, stage=stage or ALL)

    @property
    def is_active(self) -> bool:
        return self.state != ALL or self.city != ALL or self.stage != ALL


@dataclass(slots=True, frozen=True)
class RouteRequest:
    """Snapshot of one planning configuration."""

    home_address: str
    mode: RouteMode = OUT_AND_BACK
    selected_customer_ids: frozenset[str] = frozenset()
    filters: FilterState = FilterState()


@dataclass(slots=True)
class Destination:
    customer: Customer
    address: str
    distance_from_home_meters: float = 0.0


@dataclass(slots=True, frozen=True)
class Itinerary:
    """Ordered visit plan with display-ready totals.

    ``total_distance_miles`` keeps the one-decimal string shown to the user and
    ``total_time_minutes`` the rounded whole minutes; raw meters/seconds are not kept.
    """

    mode: RouteMode
    ordered_customers: tuple[Customer, ...]
    total_distance_miles: str
    total_time_minutes: int
    legs: tuple = ()


@dataclass(slots=True, frozen=True)
class SavedRoute:
    id: str
    name: str
    request: RouteRequest
    created_date: str


@dataclass(slots=True, frozen=True)
class Stop:
    """One row of the rendered itinerary (home marker or customer visit)."""

    label: str
    kind: Literal["start", "customer", "end"]
    address: str
    customer_id: Optional[str] = None
    name: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
