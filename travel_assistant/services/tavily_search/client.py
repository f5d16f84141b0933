import logging
import re
from typing import Any, Dict, List, Optional

from langchain_tavily import TavilySearch

from travel_assistant.core.config import ApiSettings
from travel_assistant.core.schemas import PlaceDetails

logger = logging.getLogger(__name__)


def clean_snippet(text: Optional[str]) -> Optional[str]:
    """Strip links and noisy whitespace from a Tavily result snippet."""

    if not text:
        return None
    text = re.sub(r"https?://\S+", "", text)
    text = re.sub(r"www\.\S+", "", text)
    text = re.sub(r"\s{2,}", " ", text)
    text = text.replace("\r", "").strip()
    return text if len(text) > 20 else None


def parse_search_results(data: Dict[str, Any]) -> PlaceDetails:
    reviews: List[str] = []
    for item in data.get("results", []):
        snippet = clean_snippet(item.get("content"))
        if snippet:
            reviews.append(snippet)

    images: List[str] = []
    for image in data.get("images", []):
        url = image.get("url") if isinstance(image, dict) else image
        if isinstance(url, str) and url:
            images.append(url)
    return PlaceDetails(reviews=reviews, images=images)


class TavilyPlaceResearch:
    """Collect review snippets and photos for a place from a Tavily web search."""

    def __init__(self, api_key: str, *, max_results: int = 5) -> None:
        self._search = TavilySearch(
            max_results=max_results,
            tavily_api_key=api_key,
            include_images=True,
            search_depth="basic",
        )

    async def place_details(self, place: str, city: str) -> PlaceDetails:
        query = f"{place}, {city} reviews"
        data = await self._search.ainvoke({"query": query})
        if not isinstance(data, dict):
            logger.debug("Unexpected Tavily payload for %r: %s", query, data)
            return PlaceDetails()
        return parse_search_results(data)


def create_place_research(settings: ApiSettings) -> Optional[TavilyPlaceResearch]:
    """Instantiate the Tavily research helper, or ``None`` when no key is configured."""

    if not settings.tavily_api_key:
        logger.warning("TAVILY_API_KEY is not set; Tavily place details are disabled")
        return None
    return TavilyPlaceResearch(settings.tavily_api_key)
