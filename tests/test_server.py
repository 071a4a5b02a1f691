"""Tests for the FastAPI app serving a browser-driven history."""

import pytest
from fastapi.testclient import TestClient

from navhistory import HistoryOptions
from navhistory.core import debug
from navhistory.web.server import API_PREFIX, create_fastapi_app


@pytest.fixture
def client():
    app = create_fastapi_app(HistoryOptions(basename="/app"))
    with TestClient(app) as c:
        yield c


def test_index_serves_client_page(client):
    resp = client.get("/app/anything")
    assert resp.status_code == 200
    assert "history.pushState" in resp.text
    assert 'location.host + "/ws"' in resp.text
    assert "<title>navhistory /app</title>" in resp.text


def test_snapshot(client):
    data = client.get(API_PREFIX).json()
    assert data["action"] == "POP"
    assert data["location"]["pathname"] == "/"
    assert data["length"] == 1
    assert data["blocked"] is False
    assert data["connected"] is False


def test_push_and_replace(client):
    resp = client.post(f"{API_PREFIX}/push", json={"path": {"pathname": "/items"}, "state": {"a": 1}})
    assert resp.status_code == 200
    data = resp.json()
    assert data["pending"] is False
    assert data["action"] == "PUSH"
    assert data["location"]["pathname"] == "/items"
    assert data["location"]["state"] == {"a": 1}
    assert data["href"] == "/app/items"
    assert data["length"] == 2

    data = client.post(f"{API_PREFIX}/replace", json={"path": "/app/other"}).json()
    assert data["action"] == "REPLACE"
    assert data["location"]["pathname"] == "/other"
    assert data["length"] == 2


def test_invalid_target(client):
    resp = client.post(f"{API_PREFIX}/push", json={"path": 42})
    assert resp.status_code == 422


@pytest.mark.parametrize("body", ["not json", "[1, 2]"])
def test_push_requires_json_object(client, body):
    resp = client.post(
        f"{API_PREFIX}/push", content=body, headers={"content-type": "application/json"}
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "expected a JSON object"


def test_go_is_forwarded(client):
    resp = client.post(f"{API_PREFIX}/go", json={"n": -1})
    assert resp.status_code == 202
    assert resp.json()["pending"] is True


def test_go_requires_integer(client):
    assert client.post(f"{API_PREFIX}/go", json={"n": "back"}).status_code == 422


def test_unknown_action(client):
    assert client.post(f"{API_PREFIX}/teleport", json={}).status_code == 404


def test_trace_endpoint(client):
    debug.enable_tracing()
    client.post(f"{API_PREFIX}/push", json={"path": "/x"})
    data = client.get(f"{API_PREFIX}/trace").json()
    assert data["enabled"] is True
    assert data["transitions"][-1]["path"] == "/x"
