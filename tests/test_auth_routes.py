"""End-to-end tests for the /api/auth endpoints."""

from __future__ import annotations

from datetime import timedelta

from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token, decode_token

from models.user import User

REGISTER_PAYLOAD = {
    "first_name": "Alice",
    "last_name": "Liddell",
    "email": "alice@example.com",
    "password": "secret123",
    "phone": "555-0100",
    "date_of_birth": "1992-05-04",
    "address": "12 Rabbit Hole Lane",
    "travel_interests": "tea parties, croquet",
}


def _register(client: FlaskClient, **overrides):
    return client.post("/api/auth/register", json={**REGISTER_PAYLOAD, **overrides})


def _login(client: FlaskClient, email: str, password: str):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def _token_for(app, email: str) -> str:
    with app.app_context():
        return User.query.filter_by(email=email).one().unique_id


def test_register_verify_login_flow(app, client, mailer):
    """Register, follow the emailed link, then log in with the same credentials."""

    response = _register(client)
    assert response.status_code == 201
    payload = response.get_json()
    assert payload["user"]["email"] == "alice@example.com"
    user_id = payload["user"]["id"]

    with app.app_context():
        users = User.query.all()
        assert len(users) == 1
        assert users[0].is_verified is False
        unique_id = users[0].unique_id

    assert unique_id in mailer.sent[0].html_body

    verify_response = client.get(f"/api/auth/verify/{unique_id}")
    assert verify_response.status_code == 200
    assert "has been verified" in verify_response.get_data(as_text=True)

    login_response = _login(client, "alice@example.com", "secret123")
    assert login_response.status_code == 200
    login_payload = login_response.get_json()
    assert login_payload["message"] == "Login successful."
    assert login_payload["user"] == {
        "id": user_id,
        "email": "alice@example.com",
        "first_name": "Alice",
        "last_name": "Liddell",
    }

    with app.app_context():
        claims = decode_token(login_payload["token"])
    assert claims["id"] == user_id
    assert claims["email"] == "alice@example.com"
    assert timedelta(seconds=claims["exp"] - claims["iat"]) == timedelta(hours=24)

    wrong = _login(client, "alice@example.com", "wrongpass")
    assert wrong.status_code == 400
    assert wrong.get_json()["detail"] == "Invalid email or password."


def test_register_duplicate_email_returns_400(client):
    assert _register(client).status_code == 201

    response = _register(client, email="ALICE@example.com")

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Conflict"
    assert payload["detail"] == "Email already registered."


def test_register_requires_email_and_password(client):
    response = client.post("/api/auth/register", json={"first_name": "NoEmail"})

    assert response.status_code == 400
    assert "email" in response.get_json()["detail"]


def test_register_rejects_non_string_password(client):
    response = _register(client, password=12345678)

    assert response.status_code == 400


def test_register_mail_failure_returns_500_and_keeps_user(app, client, mailer):
    mailer.fail = True

    response = _register(client)

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["error"] == "Mail Delivery Failed"
    with app.app_context():
        assert User.query.filter_by(email="alice@example.com").count() == 1


def test_verify_unknown_link_returns_404(client):
    response = client.get("/api/auth/verify/not-a-real-token")

    assert response.status_code == 404
    assert "Invalid verification link." in response.get_data(as_text=True)
    assert response.content_type.startswith("text/html")


def test_verify_link_can_be_replayed(app, client):
    _register(client)
    unique_id = _token_for(app, "alice@example.com")

    first = client.get(f"/api/auth/verify/{unique_id}")
    second = client.get(f"/api/auth/verify/{unique_id}")

    assert first.status_code == 200
    assert second.status_code == 200
    assert "already verified" in second.get_data(as_text=True)


def test_login_unverified_returns_403_without_token(client):
    _register(client)

    response = _login(client, "alice@example.com", "secret123")

    assert response.status_code == 403
    payload = response.get_json()
    assert "token" not in payload
    assert payload["detail"] == "Please verify your email before logging in."


def test_login_failures_do_not_reveal_which_field_was_wrong(app, client):
    _register(client)
    client.get(f"/api/auth/verify/{_token_for(app, 'alice@example.com')}")

    wrong_password = _login(client, "alice@example.com", "wrongpass")
    unknown_email = _login(client, "nobody@example.com", "secret123")

    assert wrong_password.status_code == unknown_email.status_code == 400
    first = wrong_password.get_json()
    second = unknown_email.get_json()
    first.pop("request_id")
    second.pop("request_id")
    assert first == second


def test_me_returns_claims_for_valid_token(app, client):
    _register(client)
    client.get(f"/api/auth/verify/{_token_for(app, 'alice@example.com')}")
    token = _login(client, "alice@example.com", "secret123").get_json()["token"]

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.get_json()["user"]["email"] == "alice@example.com"


def test_me_rejects_missing_and_expired_tokens(app, client):
    missing = client.get("/api/auth/me")
    assert missing.status_code == 401
    assert missing.get_json()["error"] == "Unauthorized"

    with app.app_context():
        expired = create_access_token(
            identity="1",
            additional_claims={"id": 1, "email": "alice@example.com"},
            expires_delta=timedelta(seconds=-1),
        )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert response.get_json()["detail"] == "Session token has expired."


def test_me_rejects_tampered_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer abc.def.ghi"})

    assert response.status_code == 401
