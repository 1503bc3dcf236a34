"""Demo: walk the registration flow using FastAPI TestClient.

Run with:
    python scripts/demo_register_flow.py
"""

from __future__ import annotations

import json

from fastapi.testclient import TestClient

from app.main import app

PAYLOAD = {
    "email": "  Demo.User@Example.com ",
    "password": "demo-pass-123",
    "firstName": " Demo ",
    "lastName": " User ",
}


def _show(step: str, r) -> None:  # noqa: ANN001
    print(f"{step:<38} → {r.status_code}")
    print("   " + json.dumps(r.json(), ensure_ascii=False)[:160])


def main() -> None:
    client = TestClient(app, raise_server_exceptions=False)

    _show("1. GET  /health", client.get("/health"))

    r = client.post("/api/v1/users", json=PAYLOAD)
    _show("2. POST /api/v1/users", r)
    user_id = r.json()["data"]["id"]

    _show("3. POST /api/v1/users (same email)", client.post("/api/v1/users", json=PAYLOAD))

    weak = {**PAYLOAD, "email": "weak@example.com", "password": "onlyletters"}
    _show("4. POST /api/v1/users (weak password)", client.post("/api/v1/users", json=weak))

    _show("5. GET  /api/v1/users/{id}", client.get(f"/api/v1/users/{user_id}"))
    _show("6. DELETE /api/v1/users/{id}", client.delete(f"/api/v1/users/{user_id}"))
    _show("7. GET  /api/v1/users/{id} (deleted)", client.get(f"/api/v1/users/{user_id}"))
    _show("8. GET  /nope", client.get("/nope"))


if __name__ == "__main__":
    main()
