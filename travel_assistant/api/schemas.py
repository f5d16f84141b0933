from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from travel_assistant.core.schemas import PlaceDetails, ProductSuggestion, PromptContext


class ItineraryRequest(BaseModel):
    """Request payload used to generate an itinerary."""

    city: str = Field(min_length=1, description="Destination city")
    budget: str = Field(min_length=1, description="Free-form budget, e.g. '$500'")
    interests: List[str] = Field(min_length=1, description="Traveller interests")

    @field_validator("budget", mode="before")
    @classmethod
    def stringify_budget(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("interests", mode="before")
    @classmethod
    def split_interests(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def to_context(self) -> PromptContext:
        return PromptContext(city=self.city.strip(), budget=self.budget.strip(), interests=self.interests)


class SuggestPlacesRequest(BaseModel):
    message: str = Field(min_length=1, description="Free-text trip request")


class PlacesItineraryRequest(BaseModel):
    places: List[Dict[str, Any]] = Field(min_length=1, description="Selected place records with a 'name'")
    days: int = Field(default=3, ge=1, le=14, description="Number of days to plan")


class QuestionRequest(BaseModel):
    question: str = Field(min_length=1)
    itinerary: Any = Field(description="Itinerary document the question is about")

    @field_validator("itinerary")
    @classmethod
    def require_itinerary(cls, value: Any) -> Any:
        if not value:
            raise ValueError("itinerary must not be empty")
        return value


class ItineraryResponse(BaseModel):
    itinerary: Any


class PlacesResponse(BaseModel):
    places: List[Any]
    response: str = Field(description="Raw completion text the places were extracted from")


class AnswerResponse(BaseModel):
    answer: str


class PlaceDetailsResponse(PlaceDetails):
    pass


class SuggestionsResponse(BaseModel):
    suggestions: List[ProductSuggestion]


class ErrorResponse(BaseModel):
    error: str
    raw: Optional[str] = None
