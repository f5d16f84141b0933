"""Geocoding and location resolution services.

This module provides geocoding functionality for converting place names to
coordinates using the Nominatim OpenStreetMap API.

Public API:
    - NominatimGeocoder: async geocoder returning ``Coordinates`` or ``None``
    - create_geocoder: factory building the geocoder from settings
"""
from travel_assistant.services.geocoding.geocoding import NominatimGeocoder, create_geocoder

__all__ = [
    "NominatimGeocoder",
    "create_geocoder",
]
