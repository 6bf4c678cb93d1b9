"""Geocoding proxy API schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..services.geocoding import Place


class PlaceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: float
    longitude: float
    display_name: str = Field(..., alias='displayName')
    address: dict = Field(default_factory=dict)

    @classmethod
    def from_place(cls, place: Place) -> "PlaceModel":
        return cls(
            latitude=place.latitude,
            longitude=place.longitude,
            display_name=place.display_name,
            address=place.address,
        )
