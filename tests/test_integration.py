from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fieldroute.main import create_app
from fieldroute.models.domain import Contact, Customer
from fieldroute.persistence.filesystem import FileStorage
from fieldroute.persistence.saved_routes import SavedRouteRepository, SavedRouteStore
from fieldroute.services.routing.errors import ProviderUnavailable
from fieldroute.services.routing.models import DirectionsResult, RouteLeg


def _customer(cid: str, state: str, city: str, stage: str = "Warm", active: bool = True) -> Customer:
    return Customer(
        id=cid,
        name=f"Customer {cid}",
        city=city,
        state=state,
        active=active,
        lead_stage=stage,
        address=f"{cid} Main St",
        contacts=[Contact(name="Buyer", phone=f"555-{cid}")],
    )


CUSTOMERS = (
    _customer("A", "SD", "Lennox"),
    _customer("B", "SD", "Tea", stage="Hot"),
    _customer("C", "SD", "Sioux Falls"),
    _customer("D", "IA", "Rock Valley"),
    _customer("E", "IA", "Sioux Center", active=False),
)


class DummyMaps:
    distances = {"A": 15000, "B": 5000, "C": 25000}

    def __init__(self):
        self.calls = []

    def distance_matrix(self, origin, destinations):
        self.calls.append("distance_matrix")
        return [self.distances.get(address.split(" ")[0]) for address in destinations]

    def route(self, origin, destination, waypoints, optimize=False):
        self.calls.append("route")
        legs = (
            RouteLeg(distance_meters=25000, duration_seconds=1800),
            RouteLeg(distance_meters=10000, duration_seconds=1200),
            RouteLeg(distance_meters=5000, duration_seconds=600),
        )
        return DirectionsResult(legs=legs, waypoint_order=(2, 0, 1) if optimize else None)


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from fieldroute.api.routes import customers as customers_api
    from fieldroute.api.routes import routes as routes_api
    from fieldroute.api.routes import saved_routes as saved_routes_api

    monkeypatch.setattr(customers_api, "load_customers", lambda: CUSTOMERS)
    monkeypatch.setattr(routes_api, "load_customers", lambda: CUSTOMERS)
    monkeypatch.setattr(routes_api, "get_provider", lambda: DummyMaps())
    monkeypatch.setattr(
        saved_routes_api,
        "SavedRouteStore",
        lambda: SavedRouteStore(SavedRouteRepository(FileStorage(root=tmp_path), Path("saved_routes.json"))),
    )
    return TestClient(create_app())


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}


def test_filter_options_scope_cities_to_state(api_client: TestClient):
    response = api_client.get("/api/customers/filters", params={"state": "SD"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["states"] == ["All", "IA", "SD"]
    assert payload["cities"] == ["All", "Lennox", "Sioux Falls", "Tea"]
    assert payload["stages"][0] == "All"
    assert payload["state_counts"] == {"SD": 3, "IA": 1}
    assert payload["has_active_filters"] is True


def test_customer_list_grouped_by_state(api_client: TestClient):
    response = api_client.get("/api/customers", params={"stage": "Warm"})

    payload = response.json()
    assert payload["total"] == 3
    assert [group["state"] for group in payload["groups"]] == ["IA", "SD"]
    assert [c["id"] for c in payload["groups"][1]["customers"]] == ["A", "C"]


def test_compute_out_and_back(api_client: TestClient):
    response = api_client.post(
        "/api/routes/compute",
        json={"home_address": "Canton, SD", "mode": "out-and-back", "selected_customer_ids": ["A", "B", "C"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["ordered_customer_ids"] == ["C", "A", "B"]
    assert payload["total_distance_miles"] == "24.9"
    assert payload["total_time_minutes"] == 60
    assert payload["total_time_display"] == "1h 0m"
    assert [stop["label"] for stop in payload["stops"]] == ["START", "1", "2", "3"]
    assert payload["stops"][1]["phone"] == "555-C"
    assert payload["stops"][1]["directions_url"].startswith("https://www.google.com/maps/dir/")


def test_compute_round_trip_adds_end_stop(api_client: TestClient):
    response = api_client.post(
        "/api/routes/compute",
        json={"home_address": "Canton, SD", "mode": "round-trip", "selected_customer_ids": ["A", "B", "C"]},
    )

    payload = response.json()
    assert payload["ordered_customer_ids"] == ["C", "A", "B"]
    assert [stop["kind"] for stop in payload["stops"]][-1] == "end"


def test_compute_csv(api_client: TestClient):
    response = api_client.post(
        "/api/routes/compute/csv",
        json={"home_address": "Canton, SD", "selected_customer_ids": ["A"]},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines()[0] == "stop,name,company,address,phone,customer_id"


def test_compute_empty_selection_is_rejected(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from fieldroute.api.routes import routes as routes_api

    def no_provider():
        raise AssertionError("provider should not be requested")

    monkeypatch.setattr(routes_api, "get_provider", no_provider)

    response = api_client.post("/api/routes/compute", json={"home_address": "Canton, SD", "selected_customer_ids": []})

    assert response.status_code == 400
    assert response.json()["detail"]["category"] == "invalid_selection"


def test_compute_provider_unavailable(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from fieldroute.api.routes import routes as routes_api

    def unavailable():
        raise ProviderUnavailable()

    monkeypatch.setattr(routes_api, "get_provider", unavailable)

    response = api_client.post("/api/routes/compute", json={"home_address": "Canton, SD", "selected_customer_ids": ["A"]})

    assert response.status_code == 503
    assert response.json()["detail"]["category"] == "provider_unavailable"


def test_saved_routes_lifecycle(api_client: TestClient):
    created = api_client.post(
        "/api/saved-routes",
        json={
            "name": "Tuesday",
            "request": {
                "home_address": "Canton, SD",
                "mode": "round-trip",
                "selected_customer_ids": ["A", "B"],
                "filters": {"state": "SD", "city": "All", "stage": "All"},
            },
        },
    )
    assert created.status_code == 201
    route = created.json()
    assert route["customer_count"] == 2

    listed = api_client.get("/api/saved-routes").json()
    assert [item["id"] for item in listed] == [route["id"]]

    fetched = api_client.get(f"/api/saved-routes/{route['id']}").json()
    assert fetched["request"]["selected_customer_ids"] == ["A", "B"]
    assert fetched["request"]["filters"]["state"] == "SD"

    unconfirmed = api_client.delete(f"/api/saved-routes/{route['id']}")
    assert unconfirmed.status_code == 409

    deleted = api_client.delete(f"/api/saved-routes/{route['id']}", params={"confirm": "true"})
    assert deleted.status_code == 200
    assert api_client.get(f"/api/saved-routes/{route['id']}").status_code == 404


def test_saved_route_blank_name_rejected(api_client: TestClient):
    response = api_client.post(
        "/api/saved-routes",
        json={"name": "  ", "request": {"home_address": "Canton, SD", "selected_customer_ids": ["A"]}},
    )

    assert response.status_code == 400


class FailingMaps(DummyMaps):
    def __init__(self, fail_on: str):
        super().__init__()
        self.fail_on = fail_on

    def distance_matrix(self, origin, destinations):
        if self.fail_on == "distance_matrix":
            raise ValueError("OVER_QUERY_LIMIT")
        return super().distance_matrix(origin, destinations)

    def route(self, origin, destination, waypoints, optimize=False):
        if self.fail_on == "route":
            raise ConnectionError("no response")
        return super().route(origin, destination, waypoints, optimize)


@pytest.mark.parametrize(
    ("fail_on", "category"),
    [("distance_matrix", "distance_lookup_failed"), ("route", "routing_failed")],
)
def test_compute_provider_failures_return_bad_gateway(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch, fail_on: str, category: str
):
    from fieldroute.api.routes import routes as routes_api

    monkeypatch.setattr(routes_api, "get_provider", lambda: FailingMaps(fail_on))

    response = api_client.post(
        "/api/routes/compute",
        json={"home_address": "Canton, SD", "mode": "out-and-back", "selected_customer_ids": ["A", "B"]},
    )

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["category"] == category
    assert detail["message"]


def test_saved_routes_listing_tolerates_unknown_mode(api_client: TestClient, tmp_path: Path):
    (tmp_path / "saved_routes.json").write_text(
        '[{"id": "1", "name": "Old", "routeMode": "loop", "homeAddress": "Canton, SD", "customerIds": ["A"]}]',
        encoding="utf-8",
    )

    response = api_client.get("/api/saved-routes")

    assert response.status_code == 200
    assert response.json()[0]["request"]["mode"] == "out-and-back"
