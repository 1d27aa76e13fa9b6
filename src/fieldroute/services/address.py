"""Customer address resolution for the routing provider."""

from __future__ import annotations

from urllib.parse import quote

from ..models.domain import Customer

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={destination}"


def _clean(value: str | None) -> str:
    return (value or "").strip()


def resolve_address(customer: Customer) -> str:
    """Single-line postal address: ``"{address} {city}, {state} {zip}"``.

    Missing optional parts are dropped rather than rendered, so a customer with
    only a city and state resolves to ``"Canton, SD"``.
    """
    locality = ", ".join(part for part in (_clean(customer.city), _clean(customer.state)) if part)
    parts = (_clean(customer.address), locality, _clean(customer.zip))
    return " ".join(part for part in parts if part)


def directions_url(address: str) -> str:
    return DIRECTIONS_URL.format(destination=quote(address, safe=""))
