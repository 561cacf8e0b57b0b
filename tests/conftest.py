"""Shared fixtures: lightweight stand-ins for Neo4j driver graph entities."""

from typing import Any

import pytest


class FakeNode:
    """Mimics ``neo4j.graph.Node``: element_id, labels and a property mapping."""

    def __init__(self, element_id: Any, labels, properties: dict[str, Any]) -> None:
        self.element_id = element_id
        self.labels = labels
        self._properties = properties

    def items(self):
        return self._properties.items()


class FakeRelationship:
    """Mimics ``neo4j.graph.Relationship``."""

    def __init__(
        self,
        element_id: Any,
        rel_type: str,
        start_node: FakeNode,
        end_node: FakeNode,
        properties: dict[str, Any],
    ) -> None:
        self.element_id = element_id
        self.type = rel_type
        self.start_node = start_node
        self.end_node = end_node
        self._properties = properties

    def items(self):
        return self._properties.items()


@pytest.fixture
def make_node():
    def _make(element_id, *labels, **properties) -> FakeNode:
        return FakeNode(element_id, list(labels), properties)

    return _make


@pytest.fixture
def tx_properties() -> dict[str, Any]:
    return {
        "input": "0x",
        "blockNumber": 4000000,
        "gas": 5,
        "from": "0xaaa",
        "transactionIndex": 3,
        "to": "0xbbb",
        "value": 1000000000000000000,
        "gasPrice": 20000000000,
        "hash": "0xdeadbeef",
    }


@pytest.fixture
def make_rel(tx_properties):
    def _make(element_id, rel_type, start, end, **properties) -> FakeRelationship:
        if rel_type == "Transaction" and not properties:
            properties = dict(tx_properties)
        return FakeRelationship(element_id, rel_type, start, end, properties)

    return _make


@pytest.fixture
def scenario_records(make_node, make_rel, tx_properties):
    """External X -Transaction-> Contract Y, then Contract Y -Mined-> Block Z."""
    x = make_node(1, "External", address="0xaaa")
    y = make_node(2, "Contract", address="0xbbb")
    z = make_node(3, "Block", blockNumber=99)
    return [
        (x, y, make_rel(10, "Transaction", x, y, **tx_properties)),
        (y, z, make_rel(11, "Mined", y, z)),
    ]
