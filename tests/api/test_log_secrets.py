"""Passwords must never appear in log output, on any registration path."""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

TEST_PASSWORD = "super-s3cret-p4ssword"


@pytest.mark.parametrize(
    "overrides",
    [
        {},  # success
        {"email": "not-an-email"},  # rejected before hashing
        {"password": TEST_PASSWORD + "x" * 100},  # too long
    ],
)
def test_registration_does_not_log_password(
    client: TestClient,
    registration: dict[str, str],
    caplog: pytest.LogCaptureFixture,
    overrides: dict[str, str],
) -> None:
    body = {**registration, "password": TEST_PASSWORD, **overrides}
    with caplog.at_level(logging.DEBUG):
        client.post("/api/v1/users", json=body)

    assert TEST_PASSWORD not in caplog.text, "Password found in log output!"


def test_duplicate_registration_does_not_log_password(
    client: TestClient,
    registration: dict[str, str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    body = {**registration, "password": TEST_PASSWORD}
    client.post("/api/v1/users", json=body)
    with caplog.at_level(logging.DEBUG):
        resp = client.post("/api/v1/users", json=body)

    assert resp.status_code == 409
    assert TEST_PASSWORD not in caplog.text


def test_validation_error_does_not_echo_password(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG):
        resp = client.post(
            "/api/v1/users", json={"email": "a@example.com", "password": TEST_PASSWORD}
        )

    assert resp.status_code == 422
    assert TEST_PASSWORD not in resp.text
    assert TEST_PASSWORD not in caplog.text
