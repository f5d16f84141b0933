"""Unit tests for the planning workflow (compiled graph + assistant bundle)."""
from __future__ import annotations

import asyncio
import json
import time
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Union

import pytest

from travel_assistant.api.service import AssistantBundle, guess_city
from travel_assistant.core.config import ApiSettings
from travel_assistant.core.enrichment import PlaceEnricher
from travel_assistant.core.errors import CompletionError, ExtractionError
from travel_assistant.core.graph_builder import build_planning_graph
from travel_assistant.core.schemas import Coordinates, PlaceDetails, PlaceInfo, PromptContext, State
from travel_assistant.services.completion import CompletionClient
from travel_assistant.services.graph_store import QueryLog


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class ScriptedLLM:
    """Streams preconfigured answers in small chunks and records the prompts."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    async def astream(self, messages):
        self.prompts.append(messages[0].content)
        answer = self.answers.pop(0)
        for start in range(0, len(answer), 7):
            yield SimpleNamespace(content=answer[start : start + 7])


class FailingLLM:
    async def astream(self, messages):
        raise ConnectionError("Groq unavailable")
        yield  # pragma: no cover


class FakePlaces:
    def __init__(self, answers: Dict[str, Union[PlaceInfo, Exception]]) -> None:
        self.answers = answers

    async def place_info(self, place: str, city: str) -> Optional[PlaceInfo]:
        answer = self.answers.get(place)
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def aclose(self) -> None:
        return None


class FakeGeocoder:
    def __init__(self, answers: Optional[Dict[str, Coordinates]] = None) -> None:
        self.answers = answers or {}

    async def geocode(self, place: str, city: str) -> Optional[Coordinates]:
        return self.answers.get(place)

    async def aclose(self) -> None:
        return None


class FakeResearch:
    def __init__(self, details: Union[PlaceDetails, Exception]) -> None:
        self.details = details

    async def place_details(self, place: str, city: str) -> PlaceDetails:
        if isinstance(self.details, Exception):
            raise self.details
        return self.details


class RecordingSession:
    def __init__(self, driver: "RecordingDriver") -> None:
        self.driver = driver

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def run(self, query: str, **params: Any):
        if self.driver.delay:
            await asyncio.sleep(self.driver.delay)
        if self.driver.error is not None:
            raise self.driver.error
        self.driver.params.append(params)


class RecordingDriver:
    def __init__(self, error: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.error = error
        self.delay = delay
        self.params: List[Dict[str, Any]] = []

    def session(self, database=None):
        return RecordingSession(self)

    async def close(self) -> None:
        return None


def _fenced(document: Any) -> str:
    return f"Here is your itinerary!\n```json\n{json.dumps(document, indent=2)}\n```\nHave a great trip."


PARIS_ITINERARY = {
    "itinerary": [
        {
            "day": 1,
            "activities": [
                {
                    "location": "Louvre Museum",
                    "best_time_to_visit": "Morning",
                    "cost": 17,
                    "highlights": "Mona Lisa and Winged Victory",
                }
            ],
        }
    ]
}

PARIS_CONTEXT = PromptContext(city="Paris", budget="$500", interests=["art", "food"])


def _bundle(
    llm: Any,
    *,
    places: Optional[FakePlaces] = None,
    geocoder: Optional[FakeGeocoder] = None,
    research: Optional[FakeResearch] = None,
    driver: Optional[RecordingDriver] = None,
) -> AssistantBundle:
    return AssistantBundle(
        ApiSettings(),
        completion=CompletionClient(llm),
        serp=places or FakePlaces({}),
        geocoder=geocoder or FakeGeocoder(),
        research=research or FakeResearch(PlaceDetails()),
        query_log=QueryLog(driver or RecordingDriver()),  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# Compiled graph
# ---------------------------------------------------------------------------


async def test_graph_runs_generate_extract_enrich_record():
    llm = ScriptedLLM(_fenced(PARIS_ITINERARY))
    driver = RecordingDriver()
    graph = build_planning_graph(
        completion=CompletionClient(llm),
        enricher=PlaceEnricher(
            places=FakePlaces({"Louvre Museum": PlaceInfo(rating=4.7, image="https://maps/louvre.jpg")}),
            geocoder=FakeGeocoder({"Louvre Museum": Coordinates(lat=48.8606, lon=2.3376)}),
        ),
        query_log=QueryLog(driver),  # type: ignore[arg-type]
    )

    result = await graph.ainvoke(State(), context=PARIS_CONTEXT)

    activity = result["document"]["itinerary"][0]["activities"][0]
    assert result["extraction_strategy"] == "fenced"
    assert result["enriched_records"] == 1
    assert activity["rating"] == 4.7
    assert activity["lat"] == 48.8606
    assert driver.params == [{"city": "Paris", "budget": "$500", "interests": "art, food"}]

    prompt = llm.prompts[0]
    assert "trip to Paris" in prompt
    assert "budget of $500" in prompt
    assert "interests: art, food" in prompt


async def test_graph_skips_enrichment_and_logging_when_disabled():
    driver = RecordingDriver()
    graph = build_planning_graph(
        completion=CompletionClient(ScriptedLLM(json.dumps(PARIS_ITINERARY))),
        enricher=PlaceEnricher(places=FakePlaces({"Louvre Museum": PlaceInfo(rating=4.7)})),
        query_log=QueryLog(driver),  # type: ignore[arg-type]
    )

    result = await graph.ainvoke(State(enrich=False, record_query=False), context=PARIS_CONTEXT)

    assert result["document"] == PARIS_ITINERARY
    assert result["enriched_records"] == 0
    assert driver.params == []


# ---------------------------------------------------------------------------
# Assistant bundle
# ---------------------------------------------------------------------------


async def test_plan_itinerary_end_to_end():
    bundle = _bundle(
        ScriptedLLM(_fenced(PARIS_ITINERARY)),
        places=FakePlaces({"Louvre Museum": PlaceInfo(rating=4.7, image="https://maps/louvre.jpg")}),
    )

    document = await bundle.plan_itinerary(PARIS_CONTEXT)

    activity = document["itinerary"][0]["activities"][0]
    assert activity["location"] == "Louvre Museum"
    assert activity["rating"] == 4.7
    assert activity["image"] == "https://maps/louvre.jpg"
    assert "lat" not in activity


async def test_plan_itinerary_without_provider_match_leaves_fields_absent():
    bundle = _bundle(ScriptedLLM(_fenced(PARIS_ITINERARY)))

    document = await bundle.plan_itinerary(PARIS_CONTEXT)

    assert document == PARIS_ITINERARY


async def test_plan_itinerary_survives_graph_store_failure():
    bundle = _bundle(
        ScriptedLLM(_fenced(PARIS_ITINERARY)),
        driver=RecordingDriver(error=RuntimeError("Neo4j down")),
    )

    document = await bundle.plan_itinerary(PARIS_CONTEXT)

    assert document["itinerary"][0]["day"] == 1


async def test_plan_itinerary_does_not_wait_for_a_stalled_graph_store():
    driver = RecordingDriver(delay=3.0)
    bundle = AssistantBundle(
        ApiSettings(),
        completion=CompletionClient(ScriptedLLM(_fenced(PARIS_ITINERARY))),
        serp=FakePlaces({}),
        geocoder=FakeGeocoder(),
        research=FakeResearch(PlaceDetails()),
        query_log=QueryLog(driver, timeout_s=0.05),  # type: ignore[arg-type]
    )

    started = time.monotonic()
    document = await bundle.plan_itinerary(PARIS_CONTEXT)
    elapsed = time.monotonic() - started

    assert document == PARIS_ITINERARY
    assert elapsed < 1.0
    assert driver.params == []


async def test_plan_itinerary_raises_extraction_error_with_raw_text():
    raw = "Sorry, I can only help with travel questions."
    bundle = _bundle(ScriptedLLM(raw))

    with pytest.raises(ExtractionError) as excinfo:
        await bundle.plan_itinerary(PARIS_CONTEXT)

    assert excinfo.value.raw == raw


async def test_plan_itinerary_raises_completion_error():
    bundle = _bundle(FailingLLM())

    with pytest.raises(CompletionError):
        await bundle.plan_itinerary(PARIS_CONTEXT)


async def test_suggest_places_enriches_all_but_the_failing_place():
    places = [
        {"name": "Louvre Museum", "rating": 4, "lat": 48.86, "lon": 2.33},
        {"name": "Eiffel Tower", "rating": 4},
        {"name": "Pantheon", "rating": 4},
    ]
    bundle = _bundle(
        ScriptedLLM(json.dumps(places)),
        places=FakePlaces(
            {
                "Louvre Museum": PlaceInfo(rating=4.7, address="Rue de Rivoli"),
                "Eiffel Tower": RuntimeError("SERP API error"),
                "Pantheon": PlaceInfo(rating=4.6),
            }
        ),
        geocoder=FakeGeocoder({"Pantheon": Coordinates(lat=48.8462, lon=2.3464)}),
    )

    enriched, raw = await bundle.suggest_places("Art museums in Paris")

    assert raw == json.dumps(places)
    assert [place["name"] for place in enriched] == ["Louvre Museum", "Eiffel Tower", "Pantheon"]
    louvre, eiffel, pantheon = enriched
    assert louvre["rating"] == 4.7 and louvre["address"] == "Rue de Rivoli"
    assert (louvre["lat"], louvre["lon"]) == (48.86, 2.33)
    assert eiffel["rating"] == 4 and "address" not in eiffel
    assert pantheon["rating"] == 4.6 and pantheon["lat"] == 48.8462


async def test_suggest_places_rejects_empty_list():
    bundle = _bundle(ScriptedLLM("[]"))

    with pytest.raises(ExtractionError) as excinfo:
        await bundle.suggest_places("Things to do in Rome")

    assert excinfo.value.raw == "[]"
    assert "No places" in excinfo.value.message


async def test_itinerary_from_places_mentions_every_place():
    llm = ScriptedLLM(_fenced(PARIS_ITINERARY))
    bundle = _bundle(llm)

    document = await bundle.itinerary_from_places([{"name": "Louvre Museum"}, {"name": "Pantheon"}], days=2)

    assert document == PARIS_ITINERARY
    assert "2-day itinerary" in llm.prompts[0]
    assert "Louvre Museum, Pantheon" in llm.prompts[0]


async def test_answer_question_includes_itinerary_in_prompt():
    llm = ScriptedLLM("Yes, the Louvre is closed on Tuesdays.")
    bundle = _bundle(llm)

    answer = await bundle.answer_question("Is the Louvre open on Tuesday?", PARIS_ITINERARY)

    assert answer == "Yes, the Louvre is closed on Tuesdays."
    assert "Louvre Museum" in llm.prompts[0]
    assert "Is the Louvre open on Tuesday?" in llm.prompts[0]


async def test_place_details_merges_and_deduplicates():
    bundle = _bundle(
        ScriptedLLM(),
        places=FakePlaces(
            {"Louvre Museum": PlaceInfo(image="https://img/louvre.jpg", reviews=["Crowded but worth it"])}
        ),
        research=FakeResearch(
            PlaceDetails(reviews=["Crowded but worth it", "Book ahead"], images=["https://img/louvre.jpg"])
        ),
    )

    details = await bundle.place_details("Louvre Museum", "Paris")

    assert details.reviews == ["Crowded but worth it", "Book ahead"]
    assert details.images == ["https://img/louvre.jpg"]


async def test_place_details_tolerates_one_failing_source():
    bundle = _bundle(
        ScriptedLLM(),
        places=FakePlaces({"Louvre Museum": PlaceInfo(image="https://img/louvre.jpg")}),
        research=FakeResearch(RuntimeError("Tavily quota exceeded")),
    )

    details = await bundle.place_details("Louvre Museum", "Paris")

    assert details.images == ["https://img/louvre.jpg"]
    assert details.reviews == []


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Art museums in Paris", "Paris"),
        ("romantic weekend in New York for two", "New York"),
        ("cabin trips in oslo", "oslo"),
        ("Somewhere sunny please", ""),
    ],
)
def test_guess_city(message, expected):
    assert guess_city(message) == expected
