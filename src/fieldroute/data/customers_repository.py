"""Data access helpers for loading CRM customer records."""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from ..config import settings
from ..models.domain import Contact, Customer


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_contacts(raw_contacts: Any) -> list[Contact]:
    if not isinstance(raw_contacts, list):
        return []
    return [
        Contact(
            name=_text(item.get("name")),
            title=_text(item.get("title")),
            phone=_text(item.get("phone")),
            email=_text(item.get("email")),
        )
        for item in raw_contacts
        if isinstance(item, dict)
    ]


def customer_from_record(record: dict) -> Customer:
    """Build a :class:`Customer` from a CRM export record (camelCase keys)."""
    customer_id = _text(record.get("id"))
    if customer_id is None:
        raise ValueError(f"Customer record is missing an id: {record!r}")
    return Customer(
        id=customer_id,
        name=_text(record.get("name")) or "",
        # City is kept verbatim; filters trim it when comparing.
        city=record.get("city") if isinstance(record.get("city"), str) else None,
        state=_text(record.get("state")),
        active=bool(record.get("active", True)),
        company=_text(record.get("company")),
        address=_text(record.get("address")),
        zip=_text(record.get("zip")),
        lead_stage=_text(record.get("leadStage")),
        primary_phone=_text(record.get("primaryPhone")),
        contacts=_parse_contacts(record.get("contacts")),
    )


@functools.lru_cache(maxsize=1)
def load_customers(source: Optional[Path] = None) -> tuple[Customer, ...]:
    """Load customers from the configured CRM export."""

    json_path = source or settings.customer_file
    if not json_path.exists():
        raise FileNotFoundError(f"Customer file not found: {json_path}")

    with json_path.open(mode="r", encoding="utf-8-sig") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict) and "customers" in payload:
        payload = payload["customers"]
    if not isinstance(payload, list):
        raise ValueError(f"Customer file '{json_path}' must contain a list of customers.")
    return tuple(customer_from_record(record) for record in payload if isinstance(record, dict))


def resolve_customers(customer_ids: Iterable[str], customers: Sequence[Customer]) -> list[Customer]:
    """Customers whose id is in ``customer_ids``, in customer-list order; unknown ids are skipped."""
    wanted = {str(cid).strip() for cid in customer_ids}
    return [customer for customer in customers if customer.id in wanted]
