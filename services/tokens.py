"""Session token issuance built on flask-jwt-extended."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask_jwt_extended import create_access_token, decode_token

SESSION_TOKEN_LIFETIME = timedelta(hours=24)


class SessionTokenIssuer:
    """Sign session tokens carrying a user's identity claims.

    Must be used inside an application context; the signing secret and
    algorithm come from the app's ``JWT_*`` settings.
    """

    def __init__(self, lifetime: timedelta = SESSION_TOKEN_LIFETIME):
        self.lifetime = lifetime

    def issue(self, claims: dict) -> tuple[str, datetime]:
        """Return a signed token and the moment it expires."""

        issued_at = datetime.now(timezone.utc)
        token = create_access_token(
            identity=str(claims["id"]),
            additional_claims=claims,
            expires_delta=self.lifetime,
        )
        return token, issued_at + self.lifetime

    @staticmethod
    def decode(token: str) -> dict:
        """Decode a token, checking its signature and expiry."""

        return decode_token(token)
