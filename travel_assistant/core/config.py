"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_LLM_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the external service credentials and tuning knobs."""

    groq_api_key: Optional[str] = None
    serp_api_key: Optional[str] = None
    tavily_api_key: Optional[str] = None
    neo4j_uri: Optional[str] = None
    neo4j_user: Optional[str] = None
    neo4j_password: Optional[str] = None
    neo4j_database: Optional[str] = None
    sentry_dsn: Optional[str] = None

    llm_model: str = DEFAULT_LLM_MODEL
    llm_temperature: float = 1.0
    llm_max_tokens: int = 1024
    llm_timeout_s: float = 60.0
    llm_max_retries: int = 2
    enrichment_concurrency: int = 6
    provider_timeout_s: float = 10.0
    nominatim_user_agent: str = "TravelAssistant/1.0"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from the process environment (``.env`` already applied)."""

        origins = os.getenv("CORS_ORIGINS")
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY"),
            serp_api_key=os.getenv("SERP_API_KEY"),
            tavily_api_key=os.getenv("TAVILY_API_KEY"),
            neo4j_uri=os.getenv("NEO4J_URI"),
            neo4j_user=os.getenv("NEO4J_USER"),
            neo4j_password=os.getenv("NEO4J_PASSWORD"),
            neo4j_database=os.getenv("NEO4J_DATABASE"),
            sentry_dsn=os.getenv("SENTRY_DSN"),
            llm_model=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
            llm_temperature=_env_float("LLM_TEMPERATURE", 1.0),
            llm_max_tokens=_env_int("LLM_MAX_TOKENS", 1024),
            llm_timeout_s=_env_float("LLM_TIMEOUT_S", 60.0),
            llm_max_retries=_env_int("LLM_MAX_RETRIES", 2),
            enrichment_concurrency=_env_int("ENRICHMENT_CONCURRENCY", 6),
            provider_timeout_s=_env_float("PROVIDER_TIMEOUT_S", 10.0),
            nominatim_user_agent=os.getenv("NOMINATIM_USER_AGENT", "TravelAssistant/1.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=(
                [origin.strip() for origin in origins.split(",") if origin.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
        )

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value

    @property
    def graph_store_enabled(self) -> bool:
        return bool(self.neo4j_uri and self.neo4j_user and self.neo4j_password)


def configure_logging(level: str = "INFO") -> None:
    """Apply a single root handler; repeated calls only adjust the level."""

    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level.upper())
