"""Domain service layer."""

from .centrality_service import CentralityService
from .exceptions import (
    ConnectionFailure,
    GraphAnalyzerError,
    MalformedInputError,
    MalformedRecordError,
    QueryFailure,
)
from .graph_aggregator import GraphAggregator, convert_graph
from .transaction_graph_service import TransactionGraphService

__all__ = [
    "CentralityService",
    "ConnectionFailure",
    "GraphAggregator",
    "GraphAnalyzerError",
    "MalformedInputError",
    "MalformedRecordError",
    "QueryFailure",
    "TransactionGraphService",
    "convert_graph",
]
