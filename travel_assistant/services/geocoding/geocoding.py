"""Small helpers for using the public Nominatim geocoding service."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from travel_assistant.core.config import ApiSettings
from travel_assistant.core.schemas import Coordinates

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class NominatimGeocoder:
    """Resolve ``place, city`` pairs to coordinates through Nominatim."""

    def __init__(
        self,
        *,
        user_agent: str = "TravelAssistant/1.0",
        timeout: float = 10.0,
        base_url: str = NOMINATIM_URL,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(timeout=timeout, headers={"User-Agent": user_agent})

    async def aclose(self) -> None:
        await self._client.aclose()

    async def geocode(self, place: str, city: str = "") -> Optional[Coordinates]:
        """Return the first match for ``place, city`` or ``None``; never raises."""

        if not place:
            return None

        query = f"{place}, {city}" if city else place
        try:
            response = await self._client.get(
                self.base_url,
                params={"q": query, "format": "json", "limit": 1},
            )
            response.raise_for_status()
            data = response.json()
            if not data:
                return None
            first = data[0]
            return Coordinates(lat=float(first["lat"]), lon=float(first["lon"]))
        except Exception as exc:
            logger.warning("Nominatim lookup failed for %r: %s", query, exc)
            return None


def create_geocoder(settings: ApiSettings) -> NominatimGeocoder:
    return NominatimGeocoder(
        user_agent=settings.nominatim_user_agent,
        timeout=settings.provider_timeout_s,
    )
