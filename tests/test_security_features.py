"""Tests covering security and hardening features."""

from __future__ import annotations

import sys
from pathlib import Path

from flask import Flask

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app
from conftest import RecordingEmailSender, _BaseTestConfig


def _build_app(**overrides) -> Flask:
    class TestConfig(_BaseTestConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    return create_app(TestConfig, mailer=RecordingEmailSender())


def test_cors_allows_configured_origin():
    app = _build_app(CORS_ORIGINS=["http://localhost:3000"])
    client = app.test_client()

    response = client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"
    assert response.headers.get("X-Request-ID")


def test_cors_ignores_unknown_origin():
    app = _build_app(CORS_ORIGINS=["http://localhost:3000"])
    client = app.test_client()

    response = client.get("/health", headers={"Origin": "https://evil.example"})

    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_request_id_is_echoed():
    app = _build_app()
    client = app.test_client()

    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_json_error_shape_for_invalid_request():
    app = _build_app()
    client = app.test_client()

    response = client.post(
        "/api/auth/register",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert "Request content type" in payload["detail"]
    assert payload["request_id"]


def test_storage_failure_is_reported_generically(monkeypatch):
    app = _build_app()
    client = app.test_client()
    store = app.extensions["identity_store"]

    from services.errors import StorageError

    def _unavailable(email):
        raise StorageError()

    monkeypatch.setattr(store, "find_by_email", _unavailable)

    response = client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Internal Server Error"
    assert payload["detail"] == "A server error occurred. Please try again later."
