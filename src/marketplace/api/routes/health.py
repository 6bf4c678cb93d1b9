"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...persistence.store import MarketplaceStore
from ...services.geocoding import NominatimClient, check_health
from ..dependencies import get_geocoder, get_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(store: MarketplaceStore = Depends(get_store)) -> dict:
    """Report which store backs the API and whether it answers."""
    backend = getattr(store, "backend", type(store).__name__)
    if backend == "memory":
        return {
            "configured": False,
            "backend": backend,
            "connected": True,
            "message": "Supabase not configured. Set MKT_SUPABASE_URL and MKT_SUPABASE_KEY environment variables.",
        }

    connected = store.ping()
    return {
        "configured": True,
        "backend": backend,
        "connected": connected,
        "message": "Database connected." if connected else "Database connection error.",
    }


@router.get("/health/geocoding", status_code=status.HTTP_200_OK)
def health_geocoding(client: NominatimClient = Depends(get_geocoder)) -> dict:
    """Check Nominatim availability."""
    return {"service": "nominatim", "healthy": check_health(client)}
