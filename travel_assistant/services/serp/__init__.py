"""SerpApi Google Maps integration used for place enrichment.

Public API:
    - SerpApiClient: async HTTP client returning ``PlaceInfo`` for a place/city pair
    - create_serp_client: factory building the client from settings
    - parse_place_result: payload normaliser, exposed for reuse in tests
"""
from travel_assistant.services.serp.client import SerpApiClient, create_serp_client, parse_place_result

__all__ = [
    "SerpApiClient",
    "create_serp_client",
    "parse_place_result",
]
