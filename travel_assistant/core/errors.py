"""Exception types shared by the providers, the workflow and the API."""
from __future__ import annotations


class TravelAssistantError(Exception):
    """Base class for failures that end a request."""


class CompletionError(TravelAssistantError):
    """The completion provider could not be reached or returned an error."""


class ExtractionError(TravelAssistantError):
    """No extraction strategy produced a document of the expected shape.

    ``raw`` is the untouched provider output, kept for diagnostic display.
    """

    def __init__(self, raw: str, message: str = "Could not parse structured data from AI response.") -> None:
        super().__init__(message)
        self.raw = raw
        self.message = message
