"""Serializers for printable itineraries."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import Sequence

from ...models.domain import Itinerary, Stop
from ..address import directions_url
from ..itinerary import format_duration


def _stop_to_json(stop: Stop) -> dict:
    return {
        **asdict(stop),
        "directions_url": directions_url(stop.address) if stop.kind == "customer" else None,
    }


def itinerary_to_json(itinerary: Itinerary, stops: Sequence[Stop]) -> dict:
    return {
        "mode": itinerary.mode,
        "total_distance_miles": itinerary.total_distance_miles,
        "total_time_minutes": itinerary.total_time_minutes,
        "total_time_display": format_duration(itinerary.total_time_minutes),
        "customer_count": len(itinerary.ordered_customers),
        "ordered_customer_ids": [customer.id for customer in itinerary.ordered_customers],
        "legs": [asdict(leg) for leg in itinerary.legs],
        "stops": [_stop_to_json(stop) for stop in stops],
    }


def itinerary_to_csv(stops: Sequence[Stop]) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "stop",
        "name",
        "company",
        "address",
        "phone",
        "customer_id",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in stops:
        writer.writerow(
            {
                "stop": stop.label,
                "name": stop.name or "",
                "company": stop.company or "",
                "address": stop.address,
                "phone": stop.phone or "",
                "customer_id": stop.customer_id or "",
            }
        )
    return buffer.getvalue()
