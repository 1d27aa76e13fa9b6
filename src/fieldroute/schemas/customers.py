"""Customer listing schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class CustomerModel(BaseModel):
    id: str
    name: str
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    lead_stage: Optional[str] = None
    phone: Optional[str] = None


class CustomerGroup(BaseModel):
    state: str
    customers: List[CustomerModel]


class CustomerListResponse(BaseModel):
    total: int
    groups: List[CustomerGroup]


class FilterOptionsResponse(BaseModel):
    states: List[str]
    cities: List[str]
    stages: List[str]
    state_counts: Dict[str, int]
    city_counts: Dict[str, int]
    stage_counts: Dict[str, int]
    has_active_filters: bool
