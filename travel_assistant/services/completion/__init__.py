"""Completion provider integration.

Public API:
    - CompletionClient: streams a LangChain chat model and returns the joined text
    - create_completion_client: factory building the Groq-backed client from settings
"""
from travel_assistant.services.completion.client import CompletionClient
from travel_assistant.services.completion.factory import create_completion_client

__all__ = [
    "CompletionClient",
    "create_completion_client",
]
