"""Merging of Neo4j records into a single node-link :class:`Graph`."""

from collections.abc import Iterable
from typing import Any

from loguru import logger

from ..models.graph_elements import Graph, NormalizedLink, NormalizedNode
from .entity_normalizer import entity_identity, normalize_node
from .exceptions import MalformedRecordError
from .link_classifier import classify_link

RECORD_ARITY = 3


class GraphAggregator:
    """Build one deduplicated graph from ``(node, neighbour, relationship)`` records.

    Nodes keep first-seen order and a node that reappears later, even with
    different properties, is not normalized again. Every accepted
    relationship occurrence yields a link, so a relationship returned by two
    queries appears twice.
    """

    def __init__(self) -> None:
        self._nodes: list[NormalizedNode] = []
        self._positions: dict[str, int] = {}
        self._links: list[NormalizedLink] = []

    def add_records(self, records: Iterable[Any]) -> "GraphAggregator":
        for record in records:
            self.add_record(record)
        return self

    def add_record(self, record: Any) -> None:
        if len(record) < RECORD_ARITY:
            raise MalformedRecordError(
                f"Expected {RECORD_ARITY} fields per record, got {len(record)}"
            )
        self._add_node(record[0])
        self._add_node(record[1])

        link = classify_link(record[2])
        if link is not None:
            self._links.append(link)

    def _add_node(self, entity: Any) -> None:
        identity = entity_identity(entity)
        if identity in self._positions:
            return
        self._positions[identity] = len(self._nodes)
        self._nodes.append(normalize_node(entity))

    def _position_of(self, identity: str, link_id: str) -> int:
        try:
            return self._positions[identity]
        except KeyError:
            raise MalformedRecordError(
                f"Link {link_id} references node {identity} which is not in the result"
            ) from None

    def build(self) -> Graph:
        """Resolve link endpoints to node positions and return the graph."""
        nodes = [
            node.model_copy(update={"index": position})
            for position, node in enumerate(self._nodes)
        ]
        links = [
            link.model_copy(
                update={
                    "source": self._position_of(link.source, link.id),
                    "target": self._position_of(link.target, link.id),
                }
            )
            for link in self._links
        ]
        logger.debug(f"Aggregated graph with {len(nodes)} nodes and {len(links)} links")
        return Graph(nodes=nodes, links=links)


def convert_graph(records: Iterable[Any]) -> Graph:
    """Convert query records into a :class:`Graph` in a single pass."""
    return GraphAggregator().add_records(records).build()
