"""Display model for computed itineraries."""

from __future__ import annotations

from ..models.domain import ROUND_TRIP, Customer, Itinerary, Stop
from .address import resolve_address


def _customer_phone(customer: Customer) -> str | None:
    if customer.contacts and customer.contacts[0].phone:
        return customer.contacts[0].phone
    return customer.primary_phone


def build_stop_list(itinerary: Itinerary, home_address: str) -> list[Stop]:
    """START marker, numbered customer stops, and an END marker for round trips only."""
    stops = [Stop(label="START", kind="start", address=home_address)]
    for index, customer in enumerate(itinerary.ordered_customers, start=1):
        stops.append(
            Stop(
                label=str(index),
                kind="customer",
                address=resolve_address(customer),
                customer_id=customer.id,
                name=customer.name,
                company=customer.company,
                city=customer.city,
                state=customer.state,
                phone=_customer_phone(customer),
            )
        )
    if itinerary.mode == ROUND_TRIP:
        stops.append(Stop(label="END", kind="end", address=home_address))
    return stops


def format_duration(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m"
