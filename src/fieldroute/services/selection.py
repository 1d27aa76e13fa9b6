"""Customer filtering and selection helpers for the route planner."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from ..models.domain import ALL, LEAD_STAGES, Customer, FilterState


def _trimmed(value: Optional[str]) -> str:
    return (value or "").strip()


def filter_customers(
    customers: Sequence[Customer],
    state: str = ALL,
    city: str = ALL,
    lead_stage: str = ALL,
) -> list[Customer]:
    """Active customers matching every filter that is not ``"All"``."""
    results: list[Customer] = []
    for customer in customers:
        if not customer.active:
            continue
        if state != ALL and customer.state != state:
            continue
        if city != ALL and _trimmed(customer.city) != city:
            continue
        if lead_stage != ALL and customer.lead_stage != lead_stage:
            continue
        results.append(customer)
    return results


def apply_filters(customers: Sequence[Customer], filters: FilterState) -> list[Customer]:
    return filter_customers(customers, filters.state, filters.city, filters.stage)


def available_states(customers: Sequence[Customer]) -> list[str]:
    states = {customer.state for customer in customers if customer.active and customer.state}
    return sorted(states)


def available_cities(customers: Sequence[Customer], state: str = ALL) -> list[str]:
    cities = {
        _trimmed(customer.city)
        for customer in customers
        if customer.active and (state == ALL or customer.state == state)
    }
    cities.discard("")
    return sorted(cities)


def available_stages() -> list[str]:
    return list(LEAD_STAGES)


def option_counts(customers: Sequence[Customer], field_name: str) -> dict[str, int]:
    """Number of active customers per value of ``field_name`` (state, city or lead_stage)."""
    counts: Counter[str] = Counter()
    for customer in customers:
        if not customer.active:
            continue
        value = getattr(customer, field_name)
        if field_name == "city":
            value = _trimmed(value)
        if value:
            counts[value] += 1
    return dict(counts)


def has_active_filters(filters: FilterState) -> bool:
    return filters.is_active


def change_state(filters: FilterState, state: str) -> FilterState:
    """Select a new state filter. The city filter always goes back to ``"All"``."""
    return filters.with_state(state)


def toggle_selection(selected: Iterable[str], customer_id: str) -> frozenset[str]:
    current = frozenset(selected)
    if customer_id in current:
        return current - {customer_id}
    return current | {customer_id}


def select_all_in_group(
    selected: Iterable[str],
    customers: Sequence[Customer],
    group_key: str,
    field_name: str = "state",
) -> frozenset[str]:
    """Add every active customer whose ``field_name`` equals ``group_key``."""
    group_ids = {
        customer.id
        for customer in customers
        if customer.active and getattr(customer, field_name) == group_key
    }
    return frozenset(selected) | group_ids


def clear_selection() -> frozenset[str]:
    return frozenset()


def group_by_state(customers: Sequence[Customer]) -> dict[str, list[Customer]]:
    groups: dict[str, list[Customer]] = {}
    for customer in customers:
        groups.setdefault(customer.state or "Unknown", []).append(customer)
    return {state: groups[state] for state in sorted(groups)}
