"""Geocoding proxy used by location pickers."""

from .nominatim_client import NominatimClient, Place, check_health

__all__ = ["NominatimClient", "Place", "check_health"]
