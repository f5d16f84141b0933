import asyncio
import logging
from typing import List, Optional

from neo4j import AsyncDriver, AsyncGraphDatabase

from travel_assistant.core.config import ApiSettings
from travel_assistant.core.schemas import ProductSuggestion, PromptContext

logger = logging.getLogger(__name__)

RECORD_QUERY_CYPHER = """
MERGE (c:City {name: $city})
CREATE (q:Query {budget: $budget, interests: $interests, createdAt: datetime()})
MERGE (q)-[:FOR_CITY]->(c)
"""

PRODUCT_SUGGESTIONS_CYPHER = """
MATCH (s:Store)-[:SELLS]->(p:Product)
WHERE s.city = $city AND p.category IN $categories
RETURN s.name AS store, p.name AS product, p.category AS category
"""

WEATHER_CATEGORIES = {
    "rainy": ["clothes", "gear"],
    "sunny": ["clothes", "food"],
}


class QueryLog:
    """Write-only analytics log of planning queries, plus the product lookup.

    ``record`` is best effort: any driver error is logged and swallowed, and
    the write is cut off after ``timeout_s`` so a slow or unreachable graph
    never holds up the response returned to the traveller.
    """

    def __init__(
        self,
        driver: AsyncDriver,
        *,
        database: Optional[str] = None,
        timeout_s: float = 10.0,
    ) -> None:
        self._driver = driver
        self._database = database
        self.timeout_s = timeout_s

    async def close(self) -> None:
        await self._driver.close()

    async def record(self, context: PromptContext) -> bool:
        """Log ``context`` as a Query node linked to its City; return whether it was stored."""

        try:
            await asyncio.wait_for(self._write_query(context), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.error("Neo4j log timed out after %.1fs for city %s", self.timeout_s, context.city)
            return False
        except Exception as exc:
            logger.error("Neo4j log error: %s", exc)
            return False
        logger.debug("Logged query for city %s", context.city)
        return True

    async def _write_query(self, context: PromptContext) -> None:
        async with self._driver.session(database=self._database) as session:
            await session.run(
                RECORD_QUERY_CYPHER,
                city=context.city,
                budget=context.budget,
                interests=context.interests_text,
            )

    async def product_suggestions(self, city: str, weather: str) -> List[ProductSuggestion]:
        """Return products sold in ``city`` that suit the given weather."""

        categories = WEATHER_CATEGORIES.get(weather.lower(), [])
        if not categories:
            return []
        async with self._driver.session(database=self._database) as session:
            result = await session.run(PRODUCT_SUGGESTIONS_CYPHER, city=city, categories=categories)
            rows = await result.data()
        return [ProductSuggestion(**row) for row in rows]


def create_query_log(settings: ApiSettings) -> Optional[QueryLog]:
    """Instantiate the Neo4j-backed query log, or ``None`` when not configured."""

    if not settings.graph_store_enabled:
        logger.warning("Neo4j is not configured; query logging is disabled")
        return None
    driver = AsyncGraphDatabase.driver(
        settings.neo4j_uri,
        auth=(settings.neo4j_user, settings.neo4j_password),
    )
    return QueryLog(driver, database=settings.neo4j_database, timeout_s=settings.provider_timeout_s)
