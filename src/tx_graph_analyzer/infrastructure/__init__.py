"""Infrastructure implementations of domain interfaces."""

from .neo4j_repository import Neo4jGraphRepository
from .neo4j_utils import (
    Neo4jConnectionManager,
    create_neo4j_driver,
    execute_query,
    mask_uri,
    mask_username,
)

__all__ = [
    "Neo4jConnectionManager",
    "Neo4jGraphRepository",
    "create_neo4j_driver",
    "execute_query",
    "mask_uri",
    "mask_username",
]
