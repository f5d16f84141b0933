from langchain_groq import ChatGroq

from travel_assistant.core.config import ApiSettings
from travel_assistant.services.completion.client import CompletionClient


def create_completion_client(settings: ApiSettings) -> CompletionClient:
    """Instantiate the Groq chat model configured for JSON-only generation."""

    llm = ChatGroq(
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_s,
        max_retries=settings.llm_max_retries,
        api_key=settings.ensure("groq_api_key"),
    )
    return CompletionClient(llm)
