"""Route planning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ...data.customers_repository import load_customers
from ...models.domain import Itinerary, RouteRequest
from ...schemas.routing import ItineraryResponse, RouteRequestModel
from ...services.itinerary import build_stop_list
from ...services.outputs.routing_formatter import itinerary_to_csv, itinerary_to_json
from ...services.routing.errors import (
    DistanceLookupFailed,
    InvalidSelection,
    ProviderUnavailable,
    RouteComputationFailed,
    RoutePlanningError,
)
from ...services.routing.maps_client import get_provider
from ...services.routing.service import compute_route

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = {
    InvalidSelection: status.HTTP_400_BAD_REQUEST,
    ProviderUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    DistanceLookupFailed: status.HTTP_502_BAD_GATEWAY,
    RouteComputationFailed: status.HTTP_502_BAD_GATEWAY,
}


def _compute(payload: RouteRequestModel) -> tuple[RouteRequest, Itinerary]:
    request = payload.to_domain()
    try:
        provider = get_provider() if request.selected_customer_ids else None
        return request, compute_route(request, load_customers(), provider)
    except RoutePlanningError as exc:
        code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        raise HTTPException(status_code=code, detail=exc.to_detail()) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error computing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute route: {str(exc)}",
        ) from exc


@router.post("/compute", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
def compute(payload: RouteRequestModel) -> ItineraryResponse:
    request, itinerary = _compute(payload)
    stops = build_stop_list(itinerary, request.home_address)
    return ItineraryResponse(**itinerary_to_json(itinerary, stops))


@router.post("/compute/csv", status_code=status.HTTP_200_OK)
def compute_csv(payload: RouteRequestModel) -> Response:
    request, itinerary = _compute(payload)
    content = itinerary_to_csv(build_stop_list(itinerary, request.home_address))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route.csv"'},
    )
