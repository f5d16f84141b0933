"""Neo4j graph store used for query analytics and product suggestions.

Public API:
    - QueryLog: best-effort query logger and weather-based product lookup
    - create_query_log: factory building the log from settings
"""
from travel_assistant.services.graph_store.client import (
    WEATHER_CATEGORIES,
    QueryLog,
    create_query_log,
)

__all__ = [
    "WEATHER_CATEGORIES",
    "QueryLog",
    "create_query_log",
]
