"""AI travel assistant: LLM itineraries and place suggestions enriched with provider data."""

__version__ = "0.1.0"
