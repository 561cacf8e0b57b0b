"""Abstract graph database repository used by domain logic."""
from typing import Any, Optional, Protocol


class GraphRepository(Protocol):
    """Interface for graph database access."""

    async def execute_query(
        self,
        query: str,
        parameters: Optional[dict[str, Any]] = None,
    ) -> list[Any]:
        """Execute a read-only Cypher query and return driver records."""
        raise NotImplementedError
