import logging
from typing import Any, Dict, List, Optional

import httpx

from travel_assistant.core.config import ApiSettings
from travel_assistant.core.schemas import PlaceInfo

logger = logging.getLogger(__name__)


def _review_snippets(result: Dict[str, Any]) -> List[str]:
    """Collect review text from the shapes SerpApi uses for Maps results."""

    reviews = result.get("reviews")
    if isinstance(reviews, list):
        return [str(item) for item in reviews if isinstance(item, str) and item]

    user_reviews = result.get("user_reviews") or {}
    snippets: List[str] = []
    for item in user_reviews.get("most_relevant") or user_reviews.get("summary") or []:
        if not isinstance(item, dict):
            continue
        text = item.get("description") or item.get("snippet")
        if text:
            snippets.append(text)
    return snippets


def parse_place_result(data: Dict[str, Any]) -> Optional[PlaceInfo]:
    """Turn a Google Maps engine payload into ``PlaceInfo`` (first match only)."""

    local_results = data.get("local_results") or []
    result = local_results[0] if local_results else data.get("place_results")
    if not result:
        return None

    photos = result.get("photos") or []
    reviews = result.get("reviews")
    return PlaceInfo(
        rating=result.get("rating"),
        image=result.get("thumbnail") or (photos[0].get("thumbnail") if photos else None),
        reviews=_review_snippets(result),
        review_count=reviews if isinstance(reviews, int) else None,
        address=result.get("address"),
        link=result.get("link") or result.get("website"),
    )


class SerpApiClient:
    """Thin async wrapper around SerpApi's Google Maps search engine."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://serpapi.com",
        timeout_s: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"accept": "application/json"},
            timeout=httpx.Timeout(timeout_s, connect=10.0),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client."""

        await self._client.aclose()

    async def __aenter__(self) -> "SerpApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._client.aclose()

    async def _aget(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Execute an authenticated GET request and return the parsed JSON."""

        response = await self._client.get(path, params={**params, "api_key": self.api_key})
        response.raise_for_status()
        return response.json()

    async def place_info(self, place: str, city: str) -> Optional[PlaceInfo]:
        """Return rating/image/address/link/reviews for ``place`` in ``city``.

        Returns ``None`` when the provider has no match. HTTP errors propagate
        so callers decide whether a failed lookup matters.
        """

        query = f"{place} {city}".strip()
        data = await self._aget("/search.json", {"q": query, "engine": "google_maps"})
        info = parse_place_result(data)
        if info is None:
            logger.debug("No SerpApi match for %r", query)
        return info


def create_serp_client(settings: ApiSettings) -> Optional[SerpApiClient]:
    """Instantiate the SerpApi client, or ``None`` when no key is configured."""

    if not settings.serp_api_key:
        logger.warning("SERP_API_KEY is not set; place enrichment is disabled")
        return None
    return SerpApiClient(settings.serp_api_key, timeout_s=settings.provider_timeout_s)
