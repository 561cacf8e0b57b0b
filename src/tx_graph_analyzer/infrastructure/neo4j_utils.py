import asyncio
import re
from typing import Any, Optional

from loguru import logger
from neo4j import Driver, GraphDatabase, Record, Result, Transaction, unit_of_work
from neo4j.exceptions import DriverError, Neo4jError

from ..config import Neo4jSettingsModel
from ..domain.services.exceptions import ConnectionFailure, QueryFailure


def mask_uri(uri: str) -> str:
    """Mask sensitive parts of a URI for logging."""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", uri)


def mask_username(username: str) -> str:
    """Mask a username for logging."""
    if len(username) <= 2:
        return "***"
    return username[:2] + "*" * (len(username) - 2)


def create_neo4j_driver(settings: Neo4jSettingsModel) -> Driver:
    """Create and verify a new Neo4j driver using the provided settings.

    Raises:
        ConnectionFailure: If the settings are incomplete, the driver cannot
            be created or connectivity cannot be verified.
    """
    if not settings.uri or not settings.user or not settings.password:
        raise ConnectionFailure(
            mask_uri(settings.uri or ""),
            ValueError("Neo4j connection details are incomplete in settings."),
        )

    logger.info(
        f"Initializing Neo4j driver for URI: {mask_uri(settings.uri)} "
        f"(user {mask_username(settings.user)})"
    )
    driver: Optional[Driver] = None
    try:
        driver = GraphDatabase.driver(
            settings.uri,
            auth=(settings.user, settings.password),
            max_connection_lifetime=settings.max_connection_lifetime,
            max_connection_pool_size=settings.max_connection_pool_size,
            connection_acquisition_timeout=settings.connection_acquisition_timeout,
        )
        driver.verify_connectivity()
    except (Neo4jError, DriverError, ValueError) as e:
        logger.error(f"Neo4j driver instantiation failed: {e}")
        if driver is not None:
            driver.close()
        raise ConnectionFailure(mask_uri(settings.uri), e) from e
    logger.info("Neo4j driver initialized and connectivity verified.")
    return driver


async def execute_query(
    driver: Driver,
    query: str,
    parameters: Optional[dict[str, Any]] = None,
    database: str = "neo4j",
    timeout: float = 30.0,
) -> list[Record]:
    """
    Execute a read-only Cypher query without blocking the event loop.

    The blocking driver call runs in a worker thread inside a managed read
    transaction.

    Args:
        driver: An open Neo4j ``Driver``.
        query: The Cypher query string to execute.
        parameters: Optional dictionary of parameters to pass to the query.
        database: Database name.
        timeout: Transaction timeout in seconds.

    Returns:
        List of records returned by the query.

    Raises:
        QueryFailure: If the driver or the server reports an error. The
            driver exception is kept as ``original_error``.
    """

    def _transaction_work(tx: Transaction) -> list[Record]:
        result: Result = tx.run(query, parameters or {})
        return list(result)

    def _execute_sync_query() -> list[Record]:
        with driver.session(database=database) as session:
            logger.debug(f"Executing query on database '{database}': {query[:100]}...")
            records = session.execute_read(unit_of_work(timeout=timeout)(_transaction_work))
            logger.debug(
                f"Query executed successfully on database '{database}'. "
                f"Fetched {len(records)} records."
            )
            return records

    try:
        return await asyncio.to_thread(_execute_sync_query)
    except (Neo4jError, DriverError) as e:
        logger.error(f"Neo4j error executing Cypher query on database '{database}': {e}")
        logger.error(f"Query: {query}, Parameters: {parameters}")
        raise QueryFailure(query, e, parameters) from e


class Neo4jConnectionManager:
    """Owns the driver shared by every query of one application.

    ``connect()`` opens the driver and ``close()`` releases it; the manager
    can also be used as a context manager.
    """

    def __init__(self, settings: Neo4jSettingsModel) -> None:
        self.settings = settings
        self._driver: Optional[Driver] = None

    @property
    def is_connected(self) -> bool:
        return self._driver is not None

    @property
    def driver(self) -> Driver:
        if self._driver is None:
            raise ConnectionFailure(
                mask_uri(self.settings.uri), RuntimeError("Driver is not connected")
            )
        return self._driver

    def connect(self) -> Driver:
        if self._driver is None:
            self._driver = create_neo4j_driver(self.settings)
        return self._driver

    def close(self) -> None:
        if self._driver is not None:
            logger.info("Closing Neo4j driver.")
            self._driver.close()
            self._driver = None

    def __enter__(self) -> "Neo4jConnectionManager":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def execute_query(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> list[Record]:
        return await execute_query(
            self.driver,
            query,
            parameters,
            database=self.settings.database,
            timeout=self.settings.query_timeout,
        )
