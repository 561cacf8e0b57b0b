from .graph_elements import (
    CentralityScore,
    Graph,
    LinkType,
    NodeLabel,
    NormalizedLink,
    NormalizedNode,
    TransactionProperties,
)

__all__ = [
    "CentralityScore",
    "Graph",
    "LinkType",
    "NodeLabel",
    "NormalizedLink",
    "NormalizedNode",
    "TransactionProperties",
]
