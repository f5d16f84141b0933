"""Concurrent enrichment of extracted places and activities.

Every leaf record of an extracted document gets one unit of work; inside a
unit the place-info lookup and the geocoding lookup run side by side. Each
lookup has its own deadline and its own error handling, so a slow or broken
provider only leaves that record's fields as they were.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, Iterator, List, Optional, Protocol, TypeVar

from travel_assistant.core.schemas import Coordinates, PlaceInfo
from travel_assistant.core.types import Document

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlaceInfoProvider(Protocol):
    async def place_info(self, place: str, city: str) -> Optional[PlaceInfo]: ...


class GeocodingProvider(Protocol):
    async def geocode(self, place: str, city: str) -> Optional[Coordinates]: ...


def iter_leaf_records(document: Document) -> Iterator[Dict[str, Any]]:
    """Yield the mutable place/activity mappings inside ``document``.

    Objects are read as ``{"itinerary": [{"activities": [...]}, ...]}``; arrays
    are read as a flat list of place records. Anything else is skipped.
    """

    if isinstance(document, list):
        for item in document:
            if isinstance(item, dict):
                yield item
        return

    if not isinstance(document, dict):
        return
    days = document.get("itinerary")
    if not isinstance(days, list):
        return
    for day in days:
        if not isinstance(day, dict):
            continue
        activities = day.get("activities")
        if not isinstance(activities, list):
            continue
        for activity in activities:
            if isinstance(activity, dict):
                yield activity


def merge_place_info(record: Dict[str, Any], info: Optional[PlaceInfo]) -> bool:
    """Overwrite LLM guesses with provider values; return whether anything was merged."""

    if info is None:
        return False
    fields = info.record_fields()
    record.update(fields)
    return bool(fields)


def merge_coordinates(record: Dict[str, Any], coords: Optional[Coordinates]) -> bool:
    """Prefer provider coordinates; LLM-supplied lat/lon stay when there is no match."""

    if coords is None:
        return False
    record["lat"] = coords.lat
    record["lon"] = coords.lon
    return True


class PlaceEnricher:
    """Fan out place-info and geocoding lookups over a document's leaf records."""

    def __init__(
        self,
        *,
        places: Optional[PlaceInfoProvider] = None,
        geocoder: Optional[GeocodingProvider] = None,
        concurrency: int = 6,
        timeout_s: float = 10.0,
    ) -> None:
        self.places = places
        self.geocoder = geocoder
        self.timeout_s = timeout_s
        self._concurrency = max(1, concurrency)

    async def _guarded(self, label: str, name: str, call: Awaitable[Optional[T]]) -> Optional[T]:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.warning("%s lookup for %r timed out after %.1fs", label, name, self.timeout_s)
        except Exception as exc:
            logger.warning("%s lookup for %r failed: %s", label, name, exc)
        return None

    async def _lookup_place(self, name: str, city: str) -> Optional[PlaceInfo]:
        if self.places is None:
            return None
        return await self._guarded("Place info", name, self.places.place_info(name, city))

    async def _lookup_coordinates(self, name: str, city: str) -> Optional[Coordinates]:
        if self.geocoder is None:
            return None
        return await self._guarded("Geocoding", name, self.geocoder.geocode(name, city))

    async def enrich_record(self, record: Dict[str, Any], city: str, *, name_key: str = "location") -> bool:
        """Enrich one record in place; return whether any provider data was merged."""

        name = record.get(name_key)
        if not isinstance(name, str) or not name.strip():
            logger.debug("Skipping record without %r: %s", name_key, record)
            return False

        info, coords = await asyncio.gather(
            self._lookup_place(name, city),
            self._lookup_coordinates(name, city),
        )
        merged_info = merge_place_info(record, info)
        merged_coords = merge_coordinates(record, coords)
        return merged_info or merged_coords

    async def enrich(self, document: Document, city: str, *, name_key: str = "location") -> int:
        """Enrich every leaf record of ``document`` in place.

        Returns:
            Number of records that received at least one provider field.
        """

        records: List[Dict[str, Any]] = list(iter_leaf_records(document))
        if not records:
            return 0

        semaphore = asyncio.Semaphore(self._concurrency)

        async def run(record: Dict[str, Any]) -> bool:
            async with semaphore:
                return await self.enrich_record(record, city, name_key=name_key)

        results = await asyncio.gather(*(run(record) for record in records))
        enriched = sum(1 for result in results if result)
        logger.info("Enriched %d of %d records for city %r", enriched, len(records), city)
        return enriched
