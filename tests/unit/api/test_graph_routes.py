from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from tx_graph_analyzer.app_setup import create_app, parse_allowed_origins
from tx_graph_analyzer.config import RuntimeSettings
from tx_graph_analyzer.domain.services.exceptions import (
    ConnectionFailure,
    MalformedInputError,
    MalformedRecordError,
    QueryFailure,
)

GRAPH = {
    "nodes": [
        {"id": "1", "index": 0, "label": "External", "properties": {}},
        {"id": "2", "index": 1, "label": "Contract", "properties": {}},
    ],
    "links": [{"id": "10", "source": 0, "target": 1, "type": "Mined"}],
}


@pytest.fixture
def app():
    connection = MagicMock()
    connection.is_connected = True
    application = create_app(settings=RuntimeSettings(), connection=connection)
    application.state.graph_service = AsyncMock()
    application.state.centrality_service = AsyncMock()
    return application


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI application (lifespan not run)."""
    return TestClient(app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "neo4j_connected": True}


def test_graph_for_account(client, app):
    app.state.graph_service.graph_for_account.return_value = GRAPH

    resp = client.get("/graph/account/0xABC")

    assert resp.status_code == 200
    assert resp.json() == GRAPH
    app.state.graph_service.graph_for_account.assert_awaited_once_with("0xABC")


def test_graph_for_accounts_passes_raw_json(client, app):
    app.state.graph_service.graph_for_accounts.return_value = GRAPH

    resp = client.get("/graph/accounts", params={"addresses": '["0xa","0xb"]'})

    assert resp.status_code == 200
    app.state.graph_service.graph_for_accounts.assert_awaited_once_with('["0xa","0xb"]')


def test_graph_for_accounts_requires_addresses(client):
    assert client.get("/graph/accounts").status_code == 422


@pytest.mark.parametrize(
    "error,status",
    [
        (MalformedInputError("bad list"), 422),
        (ConnectionFailure("bolt://db:7687"), 503),
        (QueryFailure("MATCH", RuntimeError("timeout")), 502),
        (MalformedRecordError("no labels"), 502),
    ],
)
def test_errors_are_mapped_to_status_codes(client, app, error, status):
    app.state.graph_service.graph_for_accounts.side_effect = error

    resp = client.get("/graph/accounts", params={"addresses": "[]"})

    assert resp.status_code == status
    assert resp.json()["error"] == type(error).__name__


def test_degree_centrality(client, app):
    app.state.centrality_service.degree_centrality.return_value = [
        {"address": "0xaaa", "score": 3}
    ]

    resp = client.get("/centrality/degree/External")

    assert resp.status_code == 200
    assert resp.json() == [{"address": "0xaaa", "score": 3}]
    app.state.centrality_service.degree_centrality.assert_awaited_once_with("external")


def test_betweenness_centrality(client, app):
    app.state.centrality_service.account_betweenness_centrality.return_value = []
    resp = client.get("/centrality/betweenness")
    assert resp.status_code == 200
    assert resp.json() == []


def test_lifespan_connects_and_closes(app):
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        app.state.connection.connect.assert_called_once()
    app.state.connection.close.assert_called_once()


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("*", ["*"]),
        ("http://a.example, http://b.example", ["http://a.example", "http://b.example"]),
        (" , ", ["*"]),
    ],
)
def test_parse_allowed_origins(raw, expected):
    assert parse_allowed_origins(raw) == expected
