"""Every response carries an X-Request-ID, and log lines carry the same id."""

from __future__ import annotations

import logging
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.middleware.error_handler import register_exception_handlers
from app.middleware.request_context import RequestContextMiddleware


@pytest.fixture
def crashing_client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("disk on fire")

    return TestClient(app, raise_server_exceptions=False)


def test_request_id_generated_when_not_provided(client: TestClient) -> None:
    resp = client.get("/health")
    req_id = resp.headers.get("x-request-id")
    assert req_id is not None
    uuid.UUID(req_id)  # raises ValueError if invalid


def test_request_id_echoed_when_provided(client: TestClient) -> None:
    custom_id = "my-custom-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": custom_id})
    assert resp.headers.get("x-request-id") == custom_id


def test_request_id_present_on_error_responses(client: TestClient) -> None:
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.headers.get("x-request-id") is not None


def test_summary_line_logged_with_context(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="app.middleware.request_context"):
        client.get("/health", headers={"X-Request-ID": "trace-me"})

    (record,) = [
        r for r in caplog.records if r.name == "app.middleware.request_context"
    ]
    assert record.request_id == "trace-me"  # type: ignore[attr-defined]
    assert record.method == "GET"  # type: ignore[attr-defined]
    assert record.path == "/health"  # type: ignore[attr-defined]
    assert record.status_code == 200  # type: ignore[attr-defined]


def test_unexpected_error_keeps_request_id(
    crashing_client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO):
        resp = crashing_client.get("/crash", headers={"X-Request-ID": "rid-123"})

    assert resp.status_code == 500
    assert resp.headers.get("x-request-id") == "rid-123"
    assert resp.json()["error"]["code"] == "INTERNAL_ERROR"

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].request_id == "rid-123"  # type: ignore[attr-defined]
    assert errors[0].exc_info is not None

    (summary,) = [
        r for r in caplog.records if r.name == "app.middleware.request_context"
    ]
    assert summary.status_code == 500  # type: ignore[attr-defined]
