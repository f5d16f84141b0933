"""External service integrations for the travel assistant.

This package provides thin async clients for the services the assistant
orchestrates:

- Completion: Groq-hosted chat model streamed through LangChain
- SerpApi: Google Maps place enrichment (rating, image, address, link, reviews)
- Tavily: web search used for place detail reviews and images
- Geocoding: Nominatim coordinate resolution
- Graph store: Neo4j query analytics and product suggestions

Each service module exports a ``create_*`` factory taking ``ApiSettings``.
Optional services return ``None`` from their factory when not configured.

Example Usage:
    >>> from travel_assistant.core.config import ApiSettings
    >>> from travel_assistant.services import create_geocoder
    >>>
    >>> geocoder = create_geocoder(ApiSettings.from_env())
    >>> coords = await geocoder.geocode("Louvre Museum", "Paris")
"""

from travel_assistant.services.completion import CompletionClient, create_completion_client
from travel_assistant.services.geocoding import NominatimGeocoder, create_geocoder
from travel_assistant.services.graph_store import QueryLog, create_query_log
from travel_assistant.services.serp import SerpApiClient, create_serp_client
from travel_assistant.services.tavily_search import TavilyPlaceResearch, create_place_research

__all__ = [
    # Completion
    "CompletionClient",
    "create_completion_client",
    # Geocoding
    "NominatimGeocoder",
    "create_geocoder",
    # Graph store
    "QueryLog",
    "create_query_log",
    # SerpApi
    "SerpApiClient",
    "create_serp_client",
    # Tavily
    "TavilyPlaceResearch",
    "create_place_research",
]
