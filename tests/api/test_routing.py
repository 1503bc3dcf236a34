from __future__ import annotations

from fastapi.testclient import TestClient

# ---- 404: undefined routes ----


def test_undefined_route_returns_404_envelope(client: TestClient) -> None:
    resp = client.get("/nonexistent")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "message": "Endpoint no encontrado",
        "error": {"code": "NOT_FOUND", "message": "Ruta /nonexistent no existe"},
    }


def test_undefined_nested_route_returns_404(client: TestClient) -> None:
    resp = client.post("/api/v2/users", json={})
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"
    assert "/api/v2/users" in resp.json()["error"]["message"]


def test_api_root(client: TestClient) -> None:
    resp = client.get("/api/v1")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "LTI ATS API v1.0"}


# ---- 405: wrong HTTP method on existing routes ----


def test_put_health_returns_405_envelope(client: TestClient) -> None:
    resp = client.put("/health", json={"status": "bad"})
    assert resp.status_code == 405
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_patch_users_returns_405(client: TestClient) -> None:
    resp = client.patch("/api/v1/users", json={})
    assert resp.status_code == 405
    assert "allow" in {k.lower() for k in resp.headers}


def test_undefined_route_message_includes_query(client: TestClient) -> None:
    resp = client.get("/nope?x=1")
    assert resp.status_code == 404
    assert resp.json()["error"] == {
        "code": "NOT_FOUND",
        "message": "Ruta /nope?x=1 no existe",
    }
