"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from services.errors import MailDeliveryError  # noqa: E402
from services.mailer import EmailSender  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    MAIL_BACKEND = "console"
    VERIFY_URL_TEMPLATE = "http://testserver/api/auth/verify/{unique_id}"
    CORS_ORIGINS = "*"


@dataclass
class SentEmail:
    to: str
    subject: str
    html_body: str


@dataclass
class RecordingEmailSender(EmailSender):
    """Email sender that keeps messages in memory and can be told to fail."""

    sent: list = field(default_factory=list)
    fail: bool = False

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append(SentEmail(to, subject, html_body))


@pytest.fixture()
def mailer() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def app(mailer: RecordingEmailSender) -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig, mailer=mailer)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def app_context(app: Flask):
    """Push an application context for tests that call services directly."""

    with app.app_context():
        yield


@pytest.fixture()
def auth_service(app: Flask, app_context):
    return app.extensions["auth_service"]


@pytest.fixture()
def store(app: Flask, app_context):
    return app.extensions["identity_store"]
