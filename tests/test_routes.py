"""
Tests for the host-facing OpnForm endpoints.
"""
import pytest
import respx
import httpx
from fastapi.testclient import TestClient
from opnform_connector.main import app

BASE = "https://api.opnform.test"
AUTH = {"apiKey": "test_key", "baseApiUrl": BASE}


@pytest.fixture
def client():
    return TestClient(app)


def test_healthz(client):
    response = client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["data"]["status"] == "healthy"


def test_readyz_reports_registered_integration(client):
    data = client.get("/readyz").json()["data"]
    assert data["ready"] is True
    assert data["checks"]["integration"] == "registered"


@respx.mock
def test_validate_auth(client):
    respx.get(f"{BASE}/open/workspaces").mock(return_value=httpx.Response(401))

    response = client.post("/opnform/auth/validate", json={"auth": AUTH})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["data"] == {"valid": False}


def test_validate_auth_rejects_missing_key(client):
    response = client.post("/opnform/auth/validate", json={"auth": {"baseApiUrl": BASE}})
    assert response.status_code == 422


def test_workspace_options_without_auth(client):
    body = client.post("/opnform/options/workspaces", json={}).json()
    assert body["ok"] is True
    assert body["data"] == {
        "disabled": True,
        "placeholder": "Connect OpnForm account",
        "options": [],
    }


@respx.mock
def test_form_options(client):
    respx.get(f"{BASE}/open/workspaces/ws1/forms").mock(
        return_value=httpx.Response(
            200,
            json={
                "meta": {"current_page": 1, "last_page": 1},
                "data": [{"id": "f1", "title": "Signup", "slug": "signup"}],
            },
        )
    )

    body = client.post(
        "/opnform/options/forms", json={"auth": AUTH, "workspaceId": "ws1"}
    ).json()

    assert body["data"]["disabled"] is False
    assert body["data"]["options"] == [{"label": "Signup", "value": "f1"}]


@respx.mock
def test_create_integration_endpoint(client):
    respx.get(f"{BASE}/open/forms/f1/integrations").mock(
        return_value=httpx.Response(200, json=[])
    )
    respx.post(f"{BASE}/open/forms/f1/integrations").mock(
        return_value=httpx.Response(200, json={"form_integration": {"id": 12}})
    )

    body = client.post(
        "/opnform/forms/f1/integrations",
        json={"auth": AUTH, "webhookUrl": "https://hook", "flowUrl": "https://flow"},
    ).json()

    assert body["ok"] is True
    assert body["data"] == {"integrationId": 12}


@respx.mock
def test_create_integration_endpoint_maps_errors(client):
    respx.get(f"{BASE}/open/forms/f1/integrations").mock(
        return_value=httpx.Response(200, json=[])
    )
    respx.post(f"{BASE}/open/forms/f1/integrations").mock(
        return_value=httpx.Response(200, json={"message": "ok"})
    )

    body = client.post(
        "/opnform/forms/f1/integrations",
        json={"auth": AUTH, "webhookUrl": "https://hook", "flowUrl": "https://flow"},
    ).json()

    assert body["ok"] is False
    assert body["error"]["code"] == "integration_creation_failed"


@respx.mock
def test_delete_integration_endpoint(client):
    route = respx.delete(f"{BASE}/open/forms/f1/integrations/42").mock(
        return_value=httpx.Response(200, json={"message": "deleted"})
    )

    body = client.request(
        "DELETE", "/opnform/forms/f1/integrations/42", json={"auth": AUTH}
    ).json()

    assert route.call_count == 1
    assert body["ok"] is True
    assert body["data"] == {"deleted": True, "status": 200}


def test_empty_auth_means_not_connected(client):
    for path, extra in (("/opnform/options/workspaces", {}), ("/opnform/options/forms", {"workspaceId": "ws1"})):
        response = client.post(path, json={"auth": {}, **extra})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["disabled"] is True
        assert data["placeholder"] == "Connect OpnForm account"


def test_empty_auth_matches_action_runner(client):
    route_state = client.post("/opnform/options/workspaces", json={"auth": {}}).json()["data"]
    action = client.post(
        "/actions/run",
        json={"integration": "opnform", "operation": "list_workspaces", "params": {"auth": {}}},
    ).json()
    assert action["disabled"] == route_state["disabled"]
    assert action["placeholder"] == route_state["placeholder"]
