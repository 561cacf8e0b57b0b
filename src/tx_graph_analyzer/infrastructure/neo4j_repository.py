"""Neo4j graph repository implementation."""
from typing import Any, Optional

from neo4j import Record

from ..domain.interfaces import GraphRepository
from .neo4j_utils import Neo4jConnectionManager


class Neo4jGraphRepository(GraphRepository):
    """GraphRepository backed by a Neo4j connection."""

    def __init__(self, connection: Neo4jConnectionManager) -> None:
        self.connection = connection

    async def execute_query(
        self,
        query: str,
        parameters: Optional[dict[str, Any]] = None,
    ) -> list[Record]:
        return await self.connection.execute_query(query, parameters)
