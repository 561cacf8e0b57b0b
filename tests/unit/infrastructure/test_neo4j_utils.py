"""
Unit tests for the Neo4j connection and query helpers.
Testing framework: pytest with pytest-asyncio for async support.
"""

from unittest.mock import MagicMock, Mock, patch

import pytest
from neo4j import Driver
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from tx_graph_analyzer.config import Neo4jSettingsModel
from tx_graph_analyzer.domain.services.exceptions import ConnectionFailure, QueryFailure
from tx_graph_analyzer.infrastructure.neo4j_repository import Neo4jGraphRepository
from tx_graph_analyzer.infrastructure.neo4j_utils import (
    Neo4jConnectionManager,
    create_neo4j_driver,
    execute_query,
    mask_uri,
    mask_username,
)


@pytest.fixture
def neo4j_settings() -> Neo4jSettingsModel:
    return Neo4jSettingsModel(
        uri="bolt://localhost:7687", user="neo4j", password="secret", database="eth"
    )


@pytest.fixture
def mock_neo4j_driver():
    """Mock Neo4j GraphDatabase driver."""
    with patch(
        "tx_graph_analyzer.infrastructure.neo4j_utils.GraphDatabase.driver"
    ) as mock_driver:
        mock_instance = Mock(spec=Driver)
        mock_instance.verify_connectivity.return_value = None
        mock_instance.close.return_value = None
        mock_driver.return_value = mock_instance
        yield mock_driver, mock_instance


def _driver_returning(records=None, error=None):
    """Build a driver mock whose read transactions return ``records`` or raise ``error``."""
    driver = MagicMock()
    session = driver.session.return_value.__enter__.return_value

    def execute_read(work):
        tx = MagicMock()
        if error is not None:
            tx.run.side_effect = error
        else:
            tx.run.return_value = iter(records or [])
        return work(tx)

    session.execute_read.side_effect = execute_read
    return driver, session


class TestMasking:
    def test_mask_uri_hides_password(self):
        assert mask_uri("bolt://neo4j:hunter2@db:7687") == "bolt://neo4j:***@db:7687"

    def test_mask_uri_without_credentials_is_unchanged(self):
        assert mask_uri("bolt://db:7687") == "bolt://db:7687"

    @pytest.mark.parametrize(
        "username,expected", [("neo4j", "ne***"), ("ab", "***"), ("", "***")]
    )
    def test_mask_username(self, username, expected):
        assert mask_username(username) == expected


class TestCreateDriver:
    def test_creates_and_verifies_driver(self, neo4j_settings, mock_neo4j_driver):
        mock_driver, mock_instance = mock_neo4j_driver

        driver = create_neo4j_driver(neo4j_settings)

        assert driver is mock_instance
        mock_driver.assert_called_once()
        assert mock_driver.call_args.args == ("bolt://localhost:7687",)
        assert mock_driver.call_args.kwargs["auth"] == ("neo4j", "secret")
        mock_instance.verify_connectivity.assert_called_once()

    def test_connectivity_failure_raises_connection_failure(
        self, neo4j_settings, mock_neo4j_driver
    ):
        _, mock_instance = mock_neo4j_driver
        mock_instance.verify_connectivity.side_effect = ServiceUnavailable("down")

        with pytest.raises(ConnectionFailure) as excinfo:
            create_neo4j_driver(neo4j_settings)

        assert isinstance(excinfo.value.original_error, ServiceUnavailable)
        mock_instance.close.assert_called_once()

    def test_incomplete_settings_raise_connection_failure(self, mock_neo4j_driver):
        mock_driver, _ = mock_neo4j_driver
        settings = Neo4jSettingsModel(uri="bolt://localhost:7687", user="neo4j", password="")

        with pytest.raises(ConnectionFailure):
            create_neo4j_driver(settings)
        mock_driver.assert_not_called()


class TestExecuteQuery:
    @pytest.mark.asyncio
    async def test_returns_records_from_read_transaction(self):
        driver, session = _driver_returning(records=["r1", "r2"])

        records = await execute_query(driver, "MATCH (n) RETURN n", {"a": 1}, database="eth")

        assert records == ["r1", "r2"]
        driver.session.assert_called_once_with(database="eth")
        session.execute_read.assert_called_once()

    @pytest.mark.asyncio
    async def test_neo4j_error_is_wrapped_in_query_failure(self):
        error = Neo4jError("syntax error")
        driver, _ = _driver_returning(error=error)

        with pytest.raises(QueryFailure) as excinfo:
            await execute_query(driver, "MATCH (", {"address": "0xa"})

        assert excinfo.value.original_error is error
        assert excinfo.value.__cause__ is error
        assert excinfo.value.parameters == {"address": "0xa"}

    @pytest.mark.asyncio
    async def test_service_unavailable_is_wrapped_in_query_failure(self):
        driver, _ = _driver_returning(error=ServiceUnavailable("gone"))

        with pytest.raises(QueryFailure):
            await execute_query(driver, "MATCH (n) RETURN n")


class TestConnectionManager:
    def test_context_manager_connects_and_closes(self, neo4j_settings, mock_neo4j_driver):
        _, mock_instance = mock_neo4j_driver

        with Neo4jConnectionManager(neo4j_settings) as connection:
            assert connection.is_connected
            assert connection.driver is mock_instance

        assert not connection.is_connected
        mock_instance.close.assert_called_once()

    def test_connect_is_idempotent(self, neo4j_settings, mock_neo4j_driver):
        mock_driver, _ = mock_neo4j_driver
        connection = Neo4jConnectionManager(neo4j_settings)

        connection.connect()
        connection.connect()

        mock_driver.assert_called_once()
        connection.close()

    def test_driver_before_connect_raises(self, neo4j_settings):
        with pytest.raises(ConnectionFailure):
            Neo4jConnectionManager(neo4j_settings).driver

    def test_close_without_connect_is_noop(self, neo4j_settings):
        Neo4jConnectionManager(neo4j_settings).close()

    @pytest.mark.asyncio
    async def test_repository_uses_connection_settings(self, neo4j_settings):
        connection = Neo4jConnectionManager(neo4j_settings)
        driver, session = _driver_returning(records=["r"])
        connection._driver = driver

        records = await Neo4jGraphRepository(connection).execute_query("RETURN 1")

        assert records == ["r"]
        driver.session.assert_called_once_with(database="eth")
