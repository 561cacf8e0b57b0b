"""Centrality rankings computed by Neo4j and returned as plain scores."""

from typing import Any, Optional

from loguru import logger

from ...config import GraphSettingsModel
from ..interfaces import GraphRepository
from ..models.graph_elements import CentralityScore
from .exceptions import MalformedInputError
from .queries import (
    ACCOUNT_BETWEENNESS_CENTRALITY,
    DEGREE_CENTRALITY_LABELS,
    degree_centrality_query,
)


class CentralityService:
    def __init__(
        self,
        repository: GraphRepository,
        graph_settings: Optional[GraphSettingsModel] = None,
    ) -> None:
        self.repository = repository
        self.graph_settings = graph_settings or GraphSettingsModel()

    async def _ranking(self, query: str) -> list[dict[str, Any]]:
        records = await self.repository.execute_query(
            query, {"limit": self.graph_settings.centrality_limit}
        )
        return [
            CentralityScore(address=record["address"], score=record["score"]).model_dump()
            for record in records
        ]

    async def degree_centrality(self, category: str) -> list[dict[str, Any]]:
        """Top nodes of ``category`` by number of ``Transaction`` relationships to accounts."""
        if category not in DEGREE_CENTRALITY_LABELS:
            raise MalformedInputError(
                f"Unknown centrality category '{category}'. "
                f"Expected one of: {', '.join(DEGREE_CENTRALITY_LABELS)}"
            )
        logger.debug(f"Computing {category} degree centrality")
        return await self._ranking(degree_centrality_query(category))

    async def account_degree_centrality(self) -> list[dict[str, Any]]:
        return await self.degree_centrality("account")

    async def external_degree_centrality(self) -> list[dict[str, Any]]:
        return await self.degree_centrality("external")

    async def contract_degree_centrality(self) -> list[dict[str, Any]]:
        return await self.degree_centrality("contract")

    async def account_betweenness_centrality(self) -> list[dict[str, Any]]:
        """
        Accounts ranked by how many shortest paths pass through them.

        Neo4j enumerates all shortest paths between account pairs, which needs
        a lot of memory on large graphs.
        """
        logger.debug("Computing account betweenness centrality")
        return await self._ranking(ACCOUNT_BETWEENNESS_CENTRALITY)
