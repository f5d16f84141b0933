"""Tavily web search integration for place detail views.

Public API:
    - TavilyPlaceResearch: gathers review snippets and images for a place
    - create_place_research: factory building the helper from settings
    - parse_search_results: payload normaliser returning ``PlaceDetails``
"""
from travel_assistant.services.tavily_search.client import (
    TavilyPlaceResearch,
    clean_snippet,
    create_place_research,
    parse_search_results,
)

__all__ = [
    "TavilyPlaceResearch",
    "clean_snippet",
    "create_place_research",
    "parse_search_results",
]
