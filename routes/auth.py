"""Authentication blueprint providing register, verify and login endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, jwt_required

from services.auth_service import AuthService
from services.errors import VerificationTokenNotFound
from utils.request_validation import parse_json_request

auth_bp = Blueprint("auth", __name__)

CLAIM_KEYS = ("id", "email", "first_name", "last_name")
PROFILE_STRING_KEYS = ("first_name", "last_name", "phone", "address", "date_of_birth")


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def _html(message: str, status: int = HTTPStatus.OK) -> tuple:
    return f"<h1>{message}</h1>", status, {"Content-Type": "text/html; charset=utf-8"}


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a traveller and email them a verification link."""
    payload = parse_json_request(
        request,
        required_keys=("email", "password"),
        string_keys=("email", "password", *PROFILE_STRING_KEYS),
    )
    result = _auth_service().register(payload)

    return (
        jsonify(
            {
                "message": "Registration successful. Check your email to verify.",
                "user": {"id": result.user_id, "email": result.email},
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify/<string:unique_id>", methods=["GET"])
def verify(unique_id: str) -> tuple:
    """Redeem the verification link sent at registration."""
    try:
        result = _auth_service().verify_by_token(unique_id)
    except VerificationTokenNotFound:
        return _html("Invalid verification link.", HTTPStatus.NOT_FOUND)

    if result.newly_verified:
        return _html("Thank you! Your email has been verified.")
    return _html("Your email is already verified.")


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a verified user and return a signed session token."""
    payload = parse_json_request(request, string_keys=("email", "password"))
    result = _auth_service().login(payload.get("email"), payload.get("password"))

    return (
        jsonify(
            {
                "token": result.token,
                "message": "Login successful.",
                "user": result.claims,
                "expires_at": result.expires_at.isoformat(),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me() -> tuple:
    """Return the identity claims of a valid, unexpired session token."""
    claims = get_jwt()
    return jsonify({"user": {key: claims.get(key) for key in CLAIM_KEYS}}), HTTPStatus.OK
