import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from travel_assistant.core.config import ApiSettings
from travel_assistant.core.enrichment import PlaceEnricher
from travel_assistant.core.errors import ExtractionError
from travel_assistant.core.extraction import extract_json
from travel_assistant.core.graph_builder import build_planning_graph
from travel_assistant.core.nodes import render_prompt
from travel_assistant.core.prompts import places_itinerary_prompt, qa_prompt, suggest_places_prompt
from travel_assistant.core.schemas import PlaceDetails, ProductSuggestion, PromptContext, State
from travel_assistant.services import (
    CompletionClient,
    NominatimGeocoder,
    QueryLog,
    SerpApiClient,
    TavilyPlaceResearch,
    create_completion_client,
    create_geocoder,
    create_place_research,
    create_query_log,
    create_serp_client,
)

logger = logging.getLogger(__name__)

SUGGESTED_PLACES_COUNT = 8

_CAPITALISED_CITY = re.compile(r"\bin ((?:[A-Z][\w'-]*)(?: [A-Z][\w'-]*)*)")
_ANY_CITY = re.compile(r"\bin ([A-Za-z ]+)", re.IGNORECASE)


def guess_city(message: str) -> str:
    """Pull a city name out of phrases like 'museums in New York'."""

    match = _CAPITALISED_CITY.search(message) or _ANY_CITY.search(message)
    return match.group(1).strip() if match else ""


def _dedupe(values: List[str]) -> List[str]:
    return list(dict.fromkeys(value for value in values if value))


class AssistantBundle:
    """Container for the planning graph and the provider clients it uses.

    Attributes:
        settings: API configuration with external service credentials
        completion: streaming completion client (mandatory)
        serp: SerpApi place enrichment client, ``None`` when not configured
        geocoder: Nominatim geocoder
        research: Tavily place research helper, ``None`` when not configured
        query_log: Neo4j query log, ``None`` when not configured
        enricher: fan-out helper shared by every request
        graph: compiled generate/extract/enrich/record workflow
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        completion: Optional[CompletionClient] = None,
        serp: Optional[SerpApiClient] = None,
        geocoder: Optional[NominatimGeocoder] = None,
        research: Optional[TavilyPlaceResearch] = None,
        query_log: Optional[QueryLog] = None,
    ) -> None:
        self.settings = settings
        self.completion = completion or create_completion_client(settings)
        self.serp = serp if serp is not None else create_serp_client(settings)
        self.geocoder = geocoder or create_geocoder(settings)
        self.research = research if research is not None else create_place_research(settings)
        self.query_log = query_log if query_log is not None else create_query_log(settings)

        self.enricher = PlaceEnricher(
            places=self.serp,
            geocoder=self.geocoder,
            concurrency=settings.enrichment_concurrency,
            timeout_s=settings.provider_timeout_s,
        )
        self.graph = build_planning_graph(
            completion=self.completion,
            enricher=self.enricher,
            query_log=self.query_log,
        )

    def __repr__(self) -> str:
        return (
            f"AssistantBundle(llm='{self.completion.model_name}', "
            f"serp={self.serp is not None}, research={self.research is not None}, "
            f"query_log={self.query_log is not None})"
        )

    async def close(self) -> None:
        if self.serp is not None:
            await self.serp.aclose()
        await self.geocoder.aclose()
        if self.query_log is not None:
            await self.query_log.close()

    async def _run(self, state: State, context: PromptContext) -> Dict[str, Any]:
        result = await self.graph.ainvoke(state, context=context)
        logger.info(
            "Workflow finished: strategy=%s enriched=%s",
            result.get("extraction_strategy"),
            result.get("enriched_records"),
        )
        return result

    async def plan_itinerary(self, context: PromptContext) -> Dict[str, Any]:
        """Generate, extract, enrich and log a day-by-day itinerary."""

        result = await self._run(State(shape="object", name_key="location"), context)
        return result["document"]

    async def draft_itinerary(self, context: PromptContext) -> str:
        """Return the completion provider's itinerary text without parsing it."""

        return await self.completion.complete(render_prompt(context))

    async def suggest_places(self, message: str) -> Tuple[List[Any], str]:
        """Suggest places for a free-text request; returns (enriched places, raw text)."""

        context = PromptContext(
            city=guess_city(message),
            raw_prompt=suggest_places_prompt.format(count=SUGGESTED_PLACES_COUNT, message=message),
        )
        state = State(shape="array", name_key="name", record_query=False)
        result = await self._run(state, context)
        places = result["document"]
        raw = result["raw_response"]
        if not places:
            raise ExtractionError(raw, "No places found in AI response")
        return places, raw

    async def itinerary_from_places(self, places: List[Dict[str, Any]], days: int = 3) -> Dict[str, Any]:
        """Arrange already selected places into a day-by-day itinerary."""

        names = ", ".join(str(place.get("name")) for place in places if place.get("name"))
        raw = await self.completion.complete(places_itinerary_prompt.format(days=days, places=names))
        return extract_json(raw, "object").document

    async def answer_question(self, question: str, itinerary: Any) -> str:
        prompt = qa_prompt.format(itinerary=json.dumps(itinerary, ensure_ascii=False), question=question)
        return await self.completion.complete(prompt)

    async def place_details(self, place: str, city: str) -> PlaceDetails:
        """Merge Tavily and SerpApi reviews/images for one place, de-duplicated."""

        async def from_research() -> PlaceDetails:
            if self.research is None:
                return PlaceDetails()
            return await self.research.place_details(place, city)

        async def from_serp() -> PlaceDetails:
            if self.serp is None:
                return PlaceDetails()
            info = await self.serp.place_info(place, city)
            if info is None:
                return PlaceDetails()
            return PlaceDetails(reviews=info.reviews, images=[info.image] if info.image else [])

        results = await asyncio.gather(from_research(), from_serp(), return_exceptions=True)
        reviews: List[str] = []
        images: List[str] = []
        for label, value in zip(("tavily", "serp"), results):
            if isinstance(value, Exception):
                logger.warning("Place details from %s failed for %r: %s", label, place, value)
                continue
            reviews.extend(value.reviews)
            images.extend(value.images)
        return PlaceDetails(reviews=_dedupe(reviews), images=_dedupe(images))

    async def product_suggestions(self, city: str, weather: str) -> List[ProductSuggestion]:
        if self.query_log is None:
            raise RuntimeError("Graph store is not configured")
        return await self.query_log.product_suggestions(city, weather)
