"""Saved route schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .routing import RouteRequestModel


class SaveRouteRequest(BaseModel):
    name: str = Field(..., description="Display name for the snapshot.")
    request: RouteRequestModel


class SavedRouteModel(BaseModel):
    id: str
    name: str
    created_date: str
    customer_count: int
    request: RouteRequestModel
