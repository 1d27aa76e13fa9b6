"""Routing provider result models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class RouteLeg:
    distance_meters: float
    duration_seconds: float
    start_address: Optional[str] = None
    end_address: Optional[str] = None


@dataclass(slots=True, frozen=True)
class DirectionsResult:
    legs: tuple[RouteLeg, ...]
    waypoint_order: Optional[tuple[int, ...]] = None
