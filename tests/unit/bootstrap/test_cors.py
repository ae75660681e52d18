"""CORS policy tests"""

import pytest

ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "https://bacosta30762.github.io",
]


def _preflight(client, origin, path="/api/v1/health", method="POST", headers="X-Taller-Id"):
    return client.options(
        path,
        headers={
            "Origin": origin,
            "Access-Control-Request-Method": method,
            "Access-Control-Request-Headers": headers,
        },
    )


@pytest.mark.parametrize("origin", ALLOWED_ORIGINS)
def test_preflight_from_allowed_origin(prod_client, origin):
    response = _preflight(prod_client, origin)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
    assert response.headers["access-control-allow-credentials"] == "true"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert "DELETE" in response.headers["access-control-allow-methods"]
    assert response.headers["access-control-allow-headers"].lower() == "x-taller-id"


def test_simple_request_from_allowed_origin(prod_client):
    response = prod_client.get("/api/v1/health", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_preflight_from_unknown_origin_is_rejected(prod_client):
    response = _preflight(prod_client, "http://evil.example")

    assert response.status_code == 400
    assert "access-control-allow-origin" not in response.headers


def test_simple_request_from_unknown_origin_is_not_allowed(prod_client):
    response = prod_client.get("/api/v1/health", headers={"Origin": "http://evil.example"})

    assert "access-control-allow-origin" not in response.headers


def test_preflight_is_answered_before_authorization(prod_client):
    response = _preflight(prod_client, "http://localhost:3000", path="/api/v1/auth/me", method="GET")
    assert response.status_code == 200


def test_rejected_request_still_carries_cors_headers(prod_client):
    """Authorization runs inside the CORS stage, so the browser can read the 401."""
    response = prod_client.get("/api/v1/auth/me", headers={"Origin": "http://localhost:3001"})

    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == "http://localhost:3001"


def test_origins_come_from_configuration(make_settings):
    from fastapi.testclient import TestClient
    from rym_lubricentro_api.bootstrap import create_app

    app = create_app(make_settings(CORS_ORIGINS=["https://taller.example"]))
    client = TestClient(app)

    allowed = client.get("/api/v1/health", headers={"Origin": "https://taller.example"})
    denied = client.get("/api/v1/health", headers={"Origin": "http://localhost:3000"})

    assert allowed.headers["access-control-allow-origin"] == "https://taller.example"
    assert "access-control-allow-origin" not in denied.headers
