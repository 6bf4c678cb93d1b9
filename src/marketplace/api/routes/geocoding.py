"""Geocoding proxy for the location pickers."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Coordinate
from ...schemas.geocoding import PlaceModel
from ...services.geocoding import NominatimClient
from ..dependencies import get_geocoder

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.get("/reverse", response_model=PlaceModel)
def reverse_geocode(
    lat: float = Query(..., description="Latitude in decimal degrees"),
    lng: float = Query(..., description="Longitude in decimal degrees"),
    client: NominatimClient = Depends(get_geocoder),
) -> PlaceModel:
    coordinate = Coordinate.parse(lat, lng)
    try:
        place = client.reverse(coordinate)
    except ConnectionError as exc:
        logging.warning(f"Reverse geocoding failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if place is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No address found for this location")
    return PlaceModel.from_place(place)


@router.get("/search", response_model=list[PlaceModel])
def search_places(
    q: str = Query(..., min_length=1, description="Free-text address or place name"),
    limit: int = Query(default=5, gt=0, le=20),
    client: NominatimClient = Depends(get_geocoder),
) -> list[PlaceModel]:
    try:
        places = client.search(q, limit=limit)
    except ConnectionError as exc:
        logging.warning(f"Place search failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [PlaceModel.from_place(place) for place in places]
