"""Classification of raw Neo4j relationships into graph links."""

from typing import Any, Optional

from loguru import logger

from ..models.graph_elements import LinkType, NormalizedLink, TransactionProperties
from .entity_normalizer import entity_identity, entity_properties
from .exceptions import MalformedRecordError

TRANSACTION_FIELDS = (
    "input",
    "blockNumber",
    "gas",
    "from",
    "transactionIndex",
    "to",
    "value",
    "gasPrice",
)
STRING_COERCED_FIELDS = frozenset(
    {"blockNumber", "gas", "transactionIndex", "value", "gasPrice"}
)


def transaction_properties(relationship: Any) -> TransactionProperties:
    """Keep the eight transaction fields and stringify the numeric ones.

    ``input``, ``from`` and ``to`` pass through as stored; a contract
    creation has no ``to`` and yields ``None``.
    """
    raw = entity_properties(relationship)
    missing = [
        name
        for name in TRANSACTION_FIELDS
        if name in STRING_COERCED_FIELDS and name not in raw
    ]
    if missing:
        raise MalformedRecordError(
            f"Transaction {entity_identity(relationship)} is missing "
            f"properties: {', '.join(missing)}"
        )

    props = {}
    for name in TRANSACTION_FIELDS:
        if name in STRING_COERCED_FIELDS:
            props[name] = str(raw[name])
        else:
            props[name] = raw.get(name)
    return TransactionProperties.model_validate(props)


def classify_link(relationship: Any) -> Optional[NormalizedLink]:
    """
    Convert a relationship into a :class:`NormalizedLink`.

    Returns ``None`` for any type other than ``Transaction`` and ``Mined``;
    such relationships are dropped from the graph.
    """
    rel_type = relationship.type
    if rel_type == LinkType.TRANSACTION.value:
        properties = transaction_properties(relationship)
    elif rel_type == LinkType.MINED.value:
        properties = None
    else:
        logger.debug(f"Dropping unsupported relationship type '{rel_type}'")
        return None

    return NormalizedLink(
        id=entity_identity(relationship),
        source=entity_identity(relationship.start_node),
        target=entity_identity(relationship.end_node),
        type=rel_type,
        properties=properties,
    )
