"""FastAPI surface for the travel assistant."""
from __future__ import annotations

# Load .env file before any other imports that might need environment variables
from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Dict, Optional

import sentry_sdk
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travel_assistant.api.dependencies import get_assistant_bundle, lifespan
from travel_assistant.api.schemas import (
    AnswerResponse,
    ErrorResponse,
    ItineraryRequest,
    ItineraryResponse,
    PlaceDetailsResponse,
    PlacesItineraryRequest,
    PlacesResponse,
    QuestionRequest,
    SuggestionsResponse,
    SuggestPlacesRequest,
)
from travel_assistant.core.config import ApiSettings, configure_logging
from travel_assistant.core.errors import CompletionError, ExtractionError

settings = ApiSettings.from_env()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

if settings.sentry_dsn:  # pragma: no cover - runtime configuration
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        enable_logs=True,
        send_default_pii=False,
        traces_sample_rate=1.0,
    )

app = FastAPI(title="Travel Assistant API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, raw: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, raw=raw).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _failure(exc: Exception, action: str) -> JSONResponse:
    """Map a failed request to ``{error, raw?}``.

    Extraction failures keep the raw provider text for debugging; completion
    failures are connectivity errors and carry no raw text. Bad request fields
    never reach this point: they are rejected as 400 by the validation handler.
    """

    if isinstance(exc, ExtractionError):
        logger.error("Could not parse %s from AI response: %r", action, exc.raw[:500])
        return _error_response(500, exc.message, raw=exc.raw)
    if isinstance(exc, CompletionError):
        logger.error("Completion provider error during %s: %s", action, exc)
        return _error_response(500, str(exc))
    logger.error("Unexpected error during %s: %s", action, exc, exc_info=True)
    return _error_response(500, str(exc) or type(exc).__name__)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or missing request fields as ``400 {error}``."""

    fields = sorted({".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]) for err in exc.errors()})
    logger.info("Rejected %s %s: invalid %s", request.method, request.url.path, fields)
    return _error_response(400, f"Missing or invalid fields: {', '.join(fields)}")


@app.post("/itinerary", response_model=ItineraryResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def plan_itinerary(payload: ItineraryRequest):
    """Generate an enriched day-by-day itinerary.

    The completion provider is asked for a JSON itinerary, the answer is run
    through the extraction cascade, every activity is enriched with rating,
    image, address, link and coordinates, and the query is logged to the
    graph store. A graph store outage never changes the response.

    Example JSON payload:
        ```json
        {"city": "Paris", "budget": "$500", "interests": ["art", "food"]}
        ```
    """

    logger.info("Itinerary request for %s (budget %s, interests %s)", payload.city, payload.budget, payload.interests)
    bundle = get_assistant_bundle()
    try:
        document = await bundle.plan_itinerary(payload.to_context())
    except Exception as exc:
        return _failure(exc, "itinerary")
    return ItineraryResponse(itinerary=document)


@app.post("/itinerary/draft", response_model=ItineraryResponse)
async def draft_itinerary(payload: ItineraryRequest):
    """Return the provider's itinerary text as-is, without parsing or enrichment."""

    bundle = get_assistant_bundle()
    try:
        text = await bundle.draft_itinerary(payload.to_context())
    except Exception as exc:
        return _failure(exc, "itinerary draft")
    return ItineraryResponse(itinerary=text)


@app.post("/suggest-places", response_model=PlacesResponse)
async def suggest_places(payload: SuggestPlacesRequest):
    """Suggest must-visit places for a free-text request such as 'art museums in Paris'."""

    logger.info("Place suggestion request: %s", payload.message)
    bundle = get_assistant_bundle()
    try:
        places, raw = await bundle.suggest_places(payload.message)
    except Exception as exc:
        return _failure(exc, "places")
    return PlacesResponse(places=places, response=raw)


@app.post("/generate-itinerary", response_model=ItineraryResponse)
async def generate_itinerary(payload: PlacesItineraryRequest):
    """Arrange the selected places into a day-by-day itinerary."""

    bundle = get_assistant_bundle()
    try:
        document = await bundle.itinerary_from_places(payload.places, payload.days)
    except Exception as exc:
        return _failure(exc, "itinerary")
    return ItineraryResponse(itinerary=document)


@app.post("/qa", response_model=AnswerResponse)
async def answer_question(payload: QuestionRequest):
    bundle = get_assistant_bundle()
    try:
        answer = await bundle.answer_question(payload.question, payload.itinerary)
    except Exception as exc:
        return _failure(exc, "question answering")
    return AnswerResponse(answer=answer)


@app.get("/place-details", response_model=PlaceDetailsResponse)
async def place_details(place: str = Query(min_length=1), city: str = Query(min_length=1)):
    """Reviews and images for one place, merged from Tavily and SerpApi."""

    bundle = get_assistant_bundle()
    details = await bundle.place_details(place, city)
    return PlaceDetailsResponse(**details.model_dump())


@app.get("/suggestions", response_model=SuggestionsResponse)
async def product_suggestions(city: str = Query(min_length=1), weather: str = Query(min_length=1)):
    """Weather-appropriate products sold in a city, read from the graph store."""

    bundle = get_assistant_bundle()
    try:
        suggestions = await bundle.product_suggestions(city, weather)
    except Exception as exc:
        return _failure(exc, "product suggestions")
    return SuggestionsResponse(suggestions=suggestions)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness probes."""

    return {"status": "healthy", "service": "travel-assistant-api"}


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
