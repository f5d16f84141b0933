"""Shared type aliases used across the assistant modules."""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import Field

Lat = Annotated[float, Field(ge=-90, le=90)]
Lon = Annotated[float, Field(ge=-180, le=180)]
Rating = Annotated[float, Field(ge=0, le=5)]

Shape = Literal["object", "array"]
Document = Union[Dict[str, Any], List[Any]]
