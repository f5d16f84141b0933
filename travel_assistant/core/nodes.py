"""LangGraph nodes for the generate -> extract -> enrich -> record pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from langgraph.runtime import Runtime

from travel_assistant.core.enrichment import PlaceEnricher
from travel_assistant.core.extraction import extract_json
from travel_assistant.core.prompts import itinerary_prompt
from travel_assistant.core.schemas import PromptContext, State
from travel_assistant.services.completion import CompletionClient
from travel_assistant.services.graph_store import QueryLog

logger = logging.getLogger(__name__)


def render_prompt(context: PromptContext) -> str:
    """Build the completion prompt, honouring a raw prompt override."""

    if context.raw_prompt:
        return context.raw_prompt
    return itinerary_prompt.format(
        city=context.city,
        budget=context.budget,
        interests=context.interests_text,
    )


def make_generate_node(completion: CompletionClient):
    async def generate_node(state: State, runtime: Runtime[PromptContext]) -> Dict[str, Any]:
        """Ask the completion provider for a JSON answer."""

        prompt = render_prompt(runtime.context)
        logger.info("Requesting %s completion for city %r", state.shape, runtime.context.city)
        raw = await completion.complete(prompt)
        logger.debug("AI response: %s", raw)
        return {"raw_response": raw}

    return generate_node


def make_extract_node():
    async def extract_node(state: State) -> Dict[str, Any]:
        """Turn the raw response into a document; ExtractionError ends the run."""

        extraction = extract_json(state.raw_response, state.shape)
        return {"document": extraction.document, "extraction_strategy": extraction.strategy}

    return extract_node


def make_enrich_node(enricher: Optional[PlaceEnricher]):
    async def enrich_node(state: State, runtime: Runtime[PromptContext]) -> Dict[str, Any]:
        if not state.enrich or enricher is None or state.document is None:
            return {"enriched_records": 0}
        count = await enricher.enrich(state.document, runtime.context.city, name_key=state.name_key)
        return {"document": state.document, "enriched_records": count}

    return enrich_node


def make_record_query_node(query_log: Optional[QueryLog]):
    async def record_query_node(state: State, runtime: Runtime[PromptContext]) -> Dict[str, Any]:
        """Log the query to the graph store; the outcome never affects the response."""

        if state.record_query and query_log is not None:
            await query_log.record(runtime.context)
        return {}

    return record_query_node
