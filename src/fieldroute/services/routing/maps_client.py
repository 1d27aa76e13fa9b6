"""HTTP client for the distance matrix and directions web services."""

from __future__ import annotations

import logging
import time
from typing import Protocol, Sequence

import httpx

from ...config import settings
from .errors import ProviderStatusError, ProviderUnavailable
from .models import DirectionsResult, RouteLeg

logger = logging.getLogger(__name__)


class RoutingProvider(Protocol):
    """Remote distance/directions provider consumed by the route engine."""

    def distance_matrix(self, origin: str, destinations: Sequence[str]) -> list[float | None]:
        ...

    def route(
        self,
        origin: str,
        destination: str,
        waypoints: Sequence[str],
        optimize: bool = False,
    ) -> DirectionsResult:
        ...


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        travel_mode: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.maps_api_key
        if not self.api_key:
            raise ValueError("Maps API key is not configured.")
        self.base_url = (base_url or settings.maps_base_url).rstrip("/")
        self.travel_mode = travel_mode or settings.maps_travel_mode
        self.timeout = timeout if timeout is not None else settings.maps_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.maps_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.maps_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    def _get_json(self, endpoint: str, params: dict) -> dict:
        """GET ``{base_url}/{endpoint}/json`` with retries on transient failures."""
        url = f"{self.base_url}/{endpoint}/json"
        query = {**params, "mode": self.travel_mode, "key": self.api_key}

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=query)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # Client errors will not change on retry.
                    if e.response.status_code < 500:
                        raise
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Maps {endpoint} request timed out after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Maps {endpoint} timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.NetworkError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to maps service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Maps network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def distance_matrix(self, origin: str, destinations: Sequence[str]) -> list[float | None]:
        """Driving distance in meters from ``origin`` to each destination, in input order.

        Elements the provider could not resolve come back as ``None``.
        """
        if not destinations:
            raise ValueError("At least one destination is required for a distance matrix.")

        data = self._get_json(
            "distancematrix",
            {"origins": origin, "destinations": "|".join(destinations)},
        )
        status = data.get("status")
        if status != "OK":
            raise ProviderStatusError(status or "UNKNOWN", data.get("error_message"))

        rows = data.get("rows") or []
        elements = rows[0].get("elements", []) if rows else []
        distances: list[float | None] = []
        for index in range(len(destinations)):
            element = elements[index] if index < len(elements) else {}
            if element.get("status") != "OK":
                distances.append(None)
                continue
            distances.append((element.get("distance") or {}).get("value"))
        return distances

    def route(
        self,
        origin: str,
        destination: str,
        waypoints: Sequence[str],
        optimize: bool = False,
    ) -> DirectionsResult:
        """Request a directions route through ``waypoints``.

        Waypoints are stopovers visited in the given order unless ``optimize`` is
        set, in which case the provider reorders them and reports the permutation
        as ``waypoint_order``.
        """
        params = {"origin": origin, "destination": destination}
        if waypoints:
            prefix = ["optimize:true"] if optimize else []
            params["waypoints"] = "|".join([*prefix, *waypoints])

        data = self._get_json("directions", params)
        status = data.get("status")
        if status != "OK":
            raise ProviderStatusError(status or "UNKNOWN", data.get("error_message"))

        routes = data.get("routes") or []
        if not routes:
            raise ProviderStatusError("ZERO_RESULTS", "Directions response contained no routes")
        first = routes[0]
        legs = tuple(
            RouteLeg(
                distance_meters=float((leg.get("distance") or {}).get("value", 0)),
                duration_seconds=float((leg.get("duration") or {}).get("value", 0)),
                start_address=leg.get("start_address"),
                end_address=leg.get("end_address"),
            )
            for leg in first.get("legs", [])
        )
        waypoint_order = None
        if optimize:
            waypoint_order = tuple(int(index) for index in first.get("waypoint_order", range(len(waypoints))))
        return DirectionsResult(legs=legs, waypoint_order=waypoint_order)


def get_provider() -> GoogleMapsClient:
    """Return a configured provider client or raise :class:`ProviderUnavailable`."""
    try:
        return GoogleMapsClient()
    except ValueError as e:
        logger.warning(f"Maps client initialization failed: {e}")
        raise ProviderUnavailable() from e


def check_health(base_url: str | None = None) -> bool:
    """Check maps provider health with a minimal geocode request."""
    if not settings.maps_api_key:
        return False
    base = (base_url or settings.maps_base_url).rstrip("/")
    try:
        response = httpx.get(
            f"{base}/geocode/json",
            params={"address": settings.default_home_address, "key": settings.maps_api_key},
            timeout=5.0,
        )
        response.raise_for_status()
        return response.json().get("status") in {"OK", "ZERO_RESULTS"}
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
