"""Saved route endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...models.domain import SavedRoute
from ...persistence.saved_routes import SavedRouteStore
from ...schemas.routing import RouteRequestModel
from ...schemas.saved_routes import SavedRouteModel, SaveRouteRequest

router = APIRouter(prefix="/saved-routes", tags=["saved-routes"])


def _to_model(route: SavedRoute) -> SavedRouteModel:
    return SavedRouteModel(
        id=route.id,
        name=route.name,
        created_date=route.created_date,
        customer_count=len(route.request.selected_customer_ids),
        request=RouteRequestModel.from_domain(route.request),
    )


@router.get("", response_model=list[SavedRouteModel])
def list_saved_routes() -> list[SavedRouteModel]:
    return [_to_model(route) for route in SavedRouteStore().list_routes()]


@router.post("", response_model=SavedRouteModel, status_code=status.HTTP_201_CREATED)
def save_route(payload: SaveRouteRequest) -> SavedRouteModel:
    try:
        route = SavedRouteStore().save(payload.name, payload.request.to_domain())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_model(route)


@router.get("/{route_id}", response_model=SavedRouteModel)
def get_saved_route(route_id: str) -> SavedRouteModel:
    try:
        return _to_model(SavedRouteStore().get(route_id))
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Saved route {route_id} not found") from exc


@router.delete("/{route_id}", status_code=status.HTTP_200_OK)
def delete_saved_route(
    route_id: str,
    confirm: bool = Query(default=False, description="Must be true to delete."),
) -> dict:
    try:
        deleted = SavedRouteStore().delete(route_id, lambda prompt: confirm)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Saved route {route_id} not found") from exc
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Deletion must be confirmed with confirm=true",
        )
    return {"success": True, "message": f"Saved route {route_id} deleted"}
