"""Streaming wrapper around the LangChain chat model used for generation."""
from __future__ import annotations

import logging
from typing import Any, List

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from travel_assistant.core.errors import CompletionError

logger = logging.getLogger(__name__)


def _chunk_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class CompletionClient:
    """Send a prompt to the completion provider and return the full text.

    The response is streamed and the chunks are concatenated, so long answers
    are not cut off by a single-response timeout on the provider side.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        self.llm = llm

    @property
    def model_name(self) -> str:
        return getattr(self.llm, "model_name", None) or getattr(self.llm, "model", None) or type(self.llm).__name__

    async def complete(self, prompt: str) -> str:
        """Return the concatenated streamed text for ``prompt``.

        Raises:
            CompletionError: the provider call failed for any reason.
        """

        chunks: List[str] = []
        try:
            async for chunk in self.llm.astream([HumanMessage(content=prompt.strip())]):
                chunks.append(_chunk_text(chunk.content))
        except Exception as exc:
            logger.error("Completion provider call failed: %s", exc, exc_info=True)
            raise CompletionError(str(exc) or type(exc).__name__) from exc

        text = "".join(chunks)
        logger.debug("Completion response (%d chars): %s", len(text), text)
        return text
