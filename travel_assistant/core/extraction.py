"""Coerce unreliable LLM text into JSON documents.

The completion provider is asked to answer with bare JSON but often wraps it
in prose or code fences, truncates it, or slips on syntax. ``extract_json``
runs an ordered list of strategies, cheapest and most precise first, and
returns the first document whose top-level type matches the requested shape.

The bracket strategies are a heuristic, not a grammar: they assume a single
top-level JSON value and no unbalanced brackets inside string literals.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import json_repair

from travel_assistant.core.errors import ExtractionError
from travel_assistant.core.types import Document, Shape

logger = logging.getLogger(__name__)

_FENCED_JSON_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_BRACKET_PATTERNS = {
    "object": re.compile(r"\{[\s\S]*\}"),
    "array": re.compile(r"\[[\s\S]*\]"),
}
_SHAPE_TYPES = {"object": dict, "array": list}

Strategy = Callable[[str, Shape], Optional[Document]]


@dataclass(frozen=True)
class Extraction:
    """A successfully extracted document and the strategy that produced it."""

    document: Document
    strategy: str


def _matches_shape(value: Any, shape: Shape) -> bool:
    return isinstance(value, _SHAPE_TYPES[shape])


def _parse(text: str, shape: Shape) -> Optional[Document]:
    value = json.loads(text)
    return value if _matches_shape(value, shape) else None


def _repair(text: str, shape: Shape) -> Optional[Document]:
    value = json_repair.loads(text)
    # An empty container from repair is almost always prose coerced into structure.
    if _matches_shape(value, shape) and value:
        return value
    return None


def _bracketed_span(raw: str, shape: Shape) -> Optional[str]:
    match = _BRACKET_PATTERNS[shape].search(raw)
    return match.group(0) if match else None


def parse_direct(raw: str, shape: Shape) -> Optional[Document]:
    return _parse(raw.strip(), shape)


def parse_fenced(raw: str, shape: Shape) -> Optional[Document]:
    match = _FENCED_JSON_PATTERN.search(raw)
    if not match:
        return None
    return _parse(match.group(1), shape)


def parse_bracketed(raw: str, shape: Shape) -> Optional[Document]:
    span = _bracketed_span(raw, shape)
    return _parse(span, shape) if span else None


def repair_bracketed(raw: str, shape: Shape) -> Optional[Document]:
    span = _bracketed_span(raw, shape)
    return _repair(span, shape) if span else None


def repair_full(raw: str, shape: Shape) -> Optional[Document]:
    return _repair(raw, shape)


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("direct", parse_direct),
    ("fenced", parse_fenced),
    ("bracketed", parse_bracketed),
    ("bracketed_repair", repair_bracketed),
    ("full_repair", repair_full),
)


def extract_json(raw: Optional[str], shape: Shape = "object") -> Extraction:
    """Return the first document of ``shape`` found in ``raw``.

    Each strategy is guarded on its own, so a parse or repair error only moves
    the cascade on to the next one.

    Raises:
        ExtractionError: every strategy failed; ``exc.raw`` is ``raw`` unchanged.
    """

    if shape not in _SHAPE_TYPES:
        raise ValueError(f"Unsupported shape '{shape}'")

    text = raw or ""
    for name, strategy in STRATEGIES:
        try:
            document = strategy(text, shape)
        except Exception as exc:
            logger.debug("Extraction strategy %s failed: %s", name, exc)
            continue
        if document is not None:
            logger.info("Extracted JSON %s using %s strategy", shape, name)
            return Extraction(document=document, strategy=name)

    logger.warning("All extraction strategies failed for %s response: %r", shape, text[:500])
    raise ExtractionError(raw if raw is not None else "")
