"""Customer selection endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...data.customers_repository import load_customers
from ...models.domain import ALL, Customer, FilterState
from ...schemas.customers import CustomerGroup, CustomerListResponse, CustomerModel, FilterOptionsResponse
from ...services import selection

router = APIRouter(prefix="/customers", tags=["customers"])


def _customers() -> tuple[Customer, ...]:
    try:
        return load_customers()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


def _to_model(customer: Customer) -> CustomerModel:
    phone = customer.contacts[0].phone if customer.contacts and customer.contacts[0].phone else customer.primary_phone
    return CustomerModel(
        id=customer.id,
        name=customer.name,
        company=customer.company,
        address=customer.address,
        city=(customer.city or "").strip() or None,
        state=customer.state,
        zip=customer.zip,
        lead_stage=customer.lead_stage,
        phone=phone,
    )


@router.get("/filters", response_model=FilterOptionsResponse)
def filter_options(
    state: str = Query(default=ALL),
    city: str = Query(default=ALL),
    stage: str = Query(default=ALL),
) -> FilterOptionsResponse:
    customers = _customers()
    return FilterOptionsResponse(
        states=[ALL, *selection.available_states(customers)],
        cities=[ALL, *selection.available_cities(customers, state)],
        stages=[ALL, *selection.available_stages()],
        state_counts=selection.option_counts(customers, "state"),
        city_counts=selection.option_counts(customers, "city"),
        stage_counts=selection.option_counts(customers, "lead_stage"),
        has_active_filters=selection.has_active_filters(FilterState(state, city, stage)),
    )


@router.get("", response_model=CustomerListResponse)
def list_customers(
    state: str = Query(default=ALL),
    city: str = Query(default=ALL),
    stage: str = Query(default=ALL),
) -> CustomerListResponse:
    visible = selection.filter_customers(_customers(), state, city, stage)
    groups = selection.group_by_state(visible)
    return CustomerListResponse(
        total=len(visible),
        groups=[
            CustomerGroup(state=group_state, customers=[_to_model(customer) for customer in members])
            for group_state, members in groups.items()
        ],
    )
