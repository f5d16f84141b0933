"""Pydantic data models for the travel assistant.

Key model categories:
- PromptContext: the per-request description of the trip being asked about
- PlaceInfo / Coordinates / PlaceDetails: normalised provider payloads
- ProductSuggestion: rows read back from the graph store
- State: LangGraph workflow state for the generate/extract/enrich pipeline

Extracted documents themselves stay plain ``dict``/``list`` values; the only
guarantee on them is that they are valid JSON of the requested shape.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from travel_assistant.core.types import Lat, Lon, Rating, Shape


class PromptContext(BaseModel):
    """Immutable description of a single planning request.

    Either ``city``/``budget``/``interests`` are filled in, or ``raw_prompt``
    overrides the generated prompt entirely.
    """

    city: str = Field(default="", description="Destination city, may be empty")
    budget: str = Field(default="", description="Free-form budget, e.g. '$500'")
    interests: List[str] = Field(default_factory=list, description="Ordered traveller interests")
    raw_prompt: Optional[str] = Field(default=None, description="Prompt sent verbatim when set")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("interests", mode="before")
    @classmethod
    def split_interests(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @property
    def interests_text(self) -> str:
        return ", ".join(self.interests)


class PlaceInfo(BaseModel):
    """Fields returned by the place-enrichment provider for one place."""

    rating: Optional[Rating] = Field(default=None, description="Average rating on a 0-5 scale")
    image: Optional[str] = Field(default=None, description="Thumbnail URL")
    reviews: List[str] = Field(default_factory=list, description="Review snippets")
    review_count: Optional[int] = Field(default=None, ge=0, description="Number of reviews on the provider")
    address: Optional[str] = Field(default=None, description="Postal address")
    link: Optional[str] = Field(default=None, description="Provider or website link")

    def record_fields(self) -> Dict[str, Any]:
        """Return only the fields the provider actually supplied."""

        return {
            key: value
            for key, value in self.model_dump().items()
            if value not in (None, "", [])
        }


class Coordinates(BaseModel):
    lat: Lat
    lon: Lon


class PlaceDetails(BaseModel):
    """Merged, de-duplicated reviews and images for a place detail view."""

    reviews: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class ProductSuggestion(BaseModel):
    store: str
    product: str
    category: Optional[str] = None


class State(BaseModel):
    """LangGraph workflow state flowing through generate -> extract -> enrich -> record.

    Attributes:
        shape: top-level JSON construct the prompt asks the model for
        name_key: leaf-record field holding the place name used for enrichment
        enrich: whether the enrichment fan-out runs
        record_query: whether the query is logged to the graph store
        raw_response: text returned by the completion provider
        document: extracted (and later enriched) document
        extraction_strategy: name of the extraction strategy that succeeded
        enriched_records: number of leaf records that received provider data
    """

    shape: Shape = "object"
    name_key: str = "location"
    enrich: bool = True
    record_query: bool = True
    raw_response: Optional[str] = None
    document: Optional[Any] = None
    extraction_strategy: Optional[str] = None
    enriched_records: int = 0
