"""Exceptions raised by the transaction graph services."""


class GraphAnalyzerError(Exception):
    """Base exception for analyzer errors."""

    pass


class ConnectionFailure(GraphAnalyzerError):
    """The Neo4j driver could not be created or its connectivity verified."""

    def __init__(self, uri: str, original_error: Exception | None = None) -> None:
        self.uri = uri
        self.original_error = original_error
        message = f"Could not connect to Neo4j at '{uri}'"
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message)


class QueryFailure(GraphAnalyzerError):
    """Error raised when a Cypher query fails during execution."""

    def __init__(
        self,
        query: str,
        original_error: Exception,
        parameters: dict | None = None,
    ) -> None:
        self.query = query
        self.original_error = original_error
        self.parameters = parameters or {}
        message = f"Query failed: {original_error}"
        super().__init__(message)


class MalformedInputError(GraphAnalyzerError, ValueError):
    """Caller supplied input that cannot be turned into queries."""


class MalformedRecordError(GraphAnalyzerError, ValueError):
    """A query record does not have the shape the graph conversion expects."""
