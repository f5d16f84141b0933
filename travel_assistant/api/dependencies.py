from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI

from travel_assistant.api.service import AssistantBundle
from travel_assistant.core.config import ApiSettings


@lru_cache(maxsize=1)
def get_assistant_bundle() -> AssistantBundle:
    settings = ApiSettings.from_env()
    return AssistantBundle(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        # Only close a bundle that was actually built.
        if get_assistant_bundle.cache_info().currsize:
            await get_assistant_bundle().close()
            get_assistant_bundle.cache_clear()
