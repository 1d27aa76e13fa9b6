"""Named route snapshots persisted as a single JSON collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from ..config import settings
from ..models.domain import ALL, OUT_AND_BACK, ROUTE_MODES, FilterState, RouteRequest, SavedRoute
from .filesystem import FileStorage

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def saved_route_to_record(route: SavedRoute) -> dict:
    request = route.request
    return {
        "id": route.id,
        "name": route.name,
        "customerIds": sorted(request.selected_customer_ids),
        "routeMode": request.mode,
        "homeAddress": request.home_address,
        "stateFilter": request.filters.state,
        "cityFilter": request.filters.city,
        "stageFilter": request.filters.stage,
        "createdDate": route.created_date,
    }


def saved_route_from_record(record: dict) -> SavedRoute:
    mode = record.get("routeMode")
    if mode not in ROUTE_MODES:
        mode = OUT_AND_BACK
    request = RouteRequest(
        home_address=record.get("homeAddress") or settings.default_home_address,
        mode=mode,
        selected_customer_ids=frozenset(str(cid) for cid in record.get("customerIds") or []),
        filters=FilterState(
            state=record.get("stateFilter") or ALL,
            city=record.get("cityFilter") or ALL,
            stage=record.get("stageFilter") or ALL,
        ),
    )
    return SavedRoute(
        id=str(record["id"]),
        name=record.get("name", ""),
        request=request,
        created_date=record.get("createdDate", ""),
    )


class SavedRouteRepository:
    """Whole-collection access to the saved routes document."""

    def __init__(self, storage: FileStorage | None = None, path: Path | None = None) -> None:
        self.storage = storage or FileStorage()
        self.path = path or settings.saved_routes_file

    def load_all(self) -> list[SavedRoute]:
        records = self.storage.read_json(self.path, default=[])
        if not isinstance(records, list):
            raise ValueError(f"Saved routes file '{self.path}' must contain a list.")
        return [saved_route_from_record(record) for record in records]

    def replace_all(self, routes: list[SavedRoute]) -> None:
        self.storage.write_json(self.path, [saved_route_to_record(route) for route in routes])


class SavedRouteStore:
    """Save, load and delete named planning snapshots.

    The repository is read on every call and written after every mutation.
    """

    def __init__(
        self,
        repository: SavedRouteRepository | None = None,
        clock: Optional[Callable[[], datetime]] = None,
        name_max_length: int | None = None,
    ) -> None:
        self.repository = repository or SavedRouteRepository()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.name_max_length = name_max_length or settings.saved_route_name_max_length

    def list_routes(self) -> list[SavedRoute]:
        return self.repository.load_all()

    def get(self, route_id: str) -> SavedRoute:
        for route in self.repository.load_all():
            if route.id == route_id:
                return route
        raise KeyError(route_id)

    def _next_id(self, now: datetime, existing: set[str]) -> str:
        candidate = int(now.timestamp() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def save(self, name: str, request: RouteRequest) -> SavedRoute:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Please enter a route name.")
        if len(cleaned) > self.name_max_length:
            raise ValueError(f"Route name must be at most {self.name_max_length} characters.")

        routes = self.repository.load_all()
        now = self.clock()
        route = SavedRoute(
            id=self._next_id(now, {existing.id for existing in routes}),
            name=cleaned,
            request=request,
            created_date=now.isoformat(),
        )
        self.repository.replace_all([*routes, route])
        logger.info(f"Saved route '{route.name}' ({route.id}) with {len(request.selected_customer_ids)} customers")
        return route

    def load(self, route_id: str) -> RouteRequest:
        """Stored snapshot, unchanged. Customer ids are not checked against current data."""
        return self.get(route_id).request

    def delete(self, route_id: str, confirm: Confirm) -> bool:
        """Remove a saved route once ``confirm`` agrees. Returns whether it was removed."""
        routes = self.repository.load_all()
        target = next((route for route in routes if route.id == route_id), None)
        if target is None:
            raise KeyError(route_id)
        if not confirm(f"Delete saved route '{target.name}'?"):
            return False
        self.repository.replace_all([route for route in routes if route.id != route_id])
        logger.info(f"Deleted saved route '{target.name}' ({route_id})")
        return True
