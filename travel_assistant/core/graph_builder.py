from typing import Any, Optional

from langgraph.graph import END, START, StateGraph

from travel_assistant.core.enrichment import PlaceEnricher
from travel_assistant.core.nodes import (
    make_enrich_node,
    make_extract_node,
    make_generate_node,
    make_record_query_node,
)
from travel_assistant.core.schemas import PromptContext, State
from travel_assistant.services.completion import CompletionClient
from travel_assistant.services.graph_store import QueryLog


def build_planning_graph(
    *,
    completion: CompletionClient,
    enricher: Optional[PlaceEnricher] = None,
    query_log: Optional[QueryLog] = None,
) -> Any:
    """Wire the planning nodes into a compiled LangGraph state machine."""

    graph_builder = StateGraph(state_schema=State, context_schema=PromptContext)

    graph_builder.add_node("generate", make_generate_node(completion))
    graph_builder.add_node("extract", make_extract_node())
    graph_builder.add_node("enrich", make_enrich_node(enricher))
    graph_builder.add_node("record_query", make_record_query_node(query_log))

    graph_builder.add_edge(START, "generate")
    graph_builder.add_edge("generate", "extract")
    graph_builder.add_edge("extract", "enrich")
    graph_builder.add_edge("enrich", "record_query")
    graph_builder.add_edge("record_query", END)

    return graph_builder.compile()
