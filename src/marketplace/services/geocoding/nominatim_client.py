"""HTTP client for the Nominatim reverse-geocoding and search API."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Place:
    latitude: float
    longitude: float
    display_name: str
    address: dict


def _place_from_payload(payload: dict) -> Place:
    return Place(
        latitude=float(payload["lat"]),
        longitude=float(payload["lon"]),
        display_name=str(payload.get("display_name") or ""),
        address=dict(payload.get("address") or {}),
    )


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        language: str | None = None,
        timeout: float = 10.0,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Nominatim base URL is not configured.")
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.language = language or settings.nominatim_language
        self.timeout = timeout
        self.max_retries = max_retries if max_retries is not None else settings.nominatim_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.nominatim_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        params = {"format": "json", "accept-language": self.language, **params}
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # client errors will not succeed on retry
                    if e.response.status_code < 500 and e.response.status_code != 429:
                        raise ValueError(
                            f"Nominatim rejected the request ({e.response.status_code})"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Nominatim unavailable after {self.max_retries} retries ({e.response.status_code})"
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(f"Failed to reach Nominatim at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Nominatim network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
        finally:
            client.close()

    def reverse(self, coordinate: Coordinate) -> Optional[Place]:
        """Return the address closest to the coordinate, or None if Nominatim finds nothing."""

        payload = self._get(
            "reverse",
            {"lat": coordinate.latitude, "lon": coordinate.longitude, "addressdetails": 1},
        )
        if not isinstance(payload, dict) or "error" in payload or "lat" not in payload:
            return None
        return _place_from_payload(payload)

    def search(self, query: str, limit: int = 5) -> list[Place]:
        if not query.strip():
            raise ValueError("Search query must not be empty")
        payload = self._get("search", {"q": query.strip(), "limit": limit, "addressdetails": 1})
        if not isinstance(payload, list):
            return []
        places: list[Place] = []
        for item in payload:
            try:
                places.append(_place_from_payload(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed Nominatim result: {e}")
        return places


def check_health(client: NominatimClient | None = None) -> bool:
    try:
        client = client or NominatimClient()
        client.search("Sanaa", limit=1)
        return True
    except Exception as e:
        logger.warning(f"Nominatim health check failed: {e}")
        return False
