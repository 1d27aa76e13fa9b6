"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import ALL, FilterState, RouteRequest


class RouteFilters(BaseModel):
    state: str = ALL
    city: str = ALL
    stage: str = ALL


class RouteRequestModel(BaseModel):
    home_address: str = Field(..., min_length=1, description="Trip origin (and destination for round trips).")
    mode: Literal["out-and-back", "round-trip"] = "out-and-back"
    selected_customer_ids: List[str] = Field(default_factory=list)
    filters: RouteFilters = Field(default_factory=RouteFilters)

    def to_domain(self) -> RouteRequest:
        return RouteRequest(
            home_address=self.home_address.strip(),
            mode=self.mode,
            selected_customer_ids=frozenset(cid.strip() for cid in self.selected_customer_ids if cid.strip()),
            filters=FilterState(self.filters.state, self.filters.city, self.filters.stage),
        )

    @classmethod
    def from_domain(cls, request: RouteRequest) -> "RouteRequestModel":
        return cls(
            home_address=request.home_address,
            mode=request.mode,
            selected_customer_ids=sorted(request.selected_customer_ids),
            filters=RouteFilters(
                state=request.filters.state,
                city=request.filters.city,
                stage=request.filters.stage,
            ),
        )


class LegModel(BaseModel):
    distance_meters: float
    duration_seconds: float
    start_address: Optional[str] = None
    end_address: Optional[str] = None


class StopModel(BaseModel):
    label: str
    kind: Literal["start", "customer", "end"]
    address: str
    customer_id: Optional[str] = None
    name: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    directions_url: Optional[str] = None


class ItineraryResponse(BaseModel):
    mode: Literal["out-and-back", "round-trip"]
    total_distance_miles: str
    total_time_minutes: int
    total_time_display: str
    customer_count: int
    ordered_customer_ids: List[str]
    legs: List[LegModel]
    stops: List[StopModel]
