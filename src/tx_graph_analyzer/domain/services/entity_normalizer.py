"""Conversion of raw Neo4j nodes into :class:`NormalizedNode` objects."""

from collections.abc import Sequence
from typing import Any

from ..models.graph_elements import NodeLabel, NormalizedNode
from .exceptions import MalformedRecordError

# Evaluated in order; the first label present on the node wins. A node that is
# both External and Contract is therefore classified as External.
LABEL_RULES: tuple[tuple[str, NodeLabel], ...] = (
    ("External", NodeLabel.EXTERNAL),
    ("Contract", NodeLabel.CONTRACT),
    ("Block", NodeLabel.BLOCK),
)


def entity_identity(entity: Any) -> str:
    """Return the string form of a node or relationship identity."""
    return str(entity.element_id)


def entity_properties(entity: Any) -> dict[str, Any]:
    """Copy the property mapping of a driver entity."""
    return dict(entity.items())


def ordered_labels(entity: Any) -> list[str]:
    # The driver exposes labels as a frozenset; sort so the fallback is stable.
    labels = entity.labels
    if isinstance(labels, Sequence) and not isinstance(labels, str):
        return list(labels)
    return sorted(labels)


def classify_labels(labels: Sequence[str]) -> str:
    """Pick the single category shown for a node with the given labels."""
    if not labels:
        raise MalformedRecordError("Node has no labels to classify")
    for raw_label, category in LABEL_RULES:
        if raw_label in labels:
            return category.value
    return labels[0]


def normalize_node(entity: Any) -> NormalizedNode:
    """
    Convert one raw node into a :class:`NormalizedNode`.

    Block nodes get their ``blockNumber`` coerced to a string; every other
    property is passed through. The raw entity is left untouched.

    Raises:
        MalformedRecordError: If the node has no labels or is a Block
            without a ``blockNumber``.
    """
    identity = entity_identity(entity)
    label = classify_labels(ordered_labels(entity))
    properties = entity_properties(entity)

    if label == NodeLabel.BLOCK.value:
        if properties.get("blockNumber") is None:
            raise MalformedRecordError(f"Block node {identity} has no blockNumber")
        properties["blockNumber"] = str(properties["blockNumber"])

    return NormalizedNode(id=identity, index=identity, label=label, properties=properties)
