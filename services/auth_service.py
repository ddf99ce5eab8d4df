"""Registration, email verification and login for travellers."""

from __future__ import annotations

import enum
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from html import escape
from typing import Any, Mapping

from werkzeug.security import check_password_hash, generate_password_hash

from store.abstract_store import IdentityStore

from .errors import EmailTaken, InvalidCredentials, NotVerified, ValidationError, VerificationTokenNotFound
from .mailer import EmailSender
from .tokens import SessionTokenIssuer

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PROFILE_FIELDS = ("first_name", "last_name", "phone", "address", "travel_interests")
VERIFY_SUBJECT = "Please verify your Travel Planner account"
DEFAULT_VERIFY_URL_TEMPLATE = "http://localhost:5000/api/auth/verify/{unique_id}"


class VerificationOutcome(str, enum.Enum):
    NEWLY_VERIFIED = "newly_verified"
    ALREADY_VERIFIED = "already_verified"


@dataclass(frozen=True)
class RegistrationResult:
    user_id: int
    unique_id: str
    email: str


@dataclass(frozen=True)
class VerificationResult:
    outcome: VerificationOutcome

    @property
    def newly_verified(self) -> bool:
        return self.outcome is VerificationOutcome.NEWLY_VERIFIED


@dataclass(frozen=True)
class LoginResult:
    token: str
    claims: dict
    expires_at: datetime


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return str(raw_email or "").strip().lower()


def _parse_birth_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError("date_of_birth must be an ISO date (YYYY-MM-DD).") from exc


def render_verification_email(first_name: str | None, verify_url: str) -> str:
    greeting = escape(str(first_name)) if first_name else "there"
    return (
        f"<p>Hi {greeting},</p>"
        f'<p>Thank you for registering! Please <a href="{escape(verify_url)}">'
        "click here to verify your email</a>.</p>"
        "<p>If you did not register, ignore this email.</p>"
    )


class AuthService:
    """Orchestrates the identity lifecycle against a store and a mailer.

    Holds no per-request state; one instance serves every request.
    """

    def __init__(
        self,
        store: IdentityStore,
        mailer: EmailSender,
        token_issuer: SessionTokenIssuer | None = None,
        *,
        verify_url_template: str = DEFAULT_VERIFY_URL_TEMPLATE,
        password_hash_method: str = "scrypt",
    ):
        self.store = store
        self.mailer = mailer
        self.token_issuer = token_issuer or SessionTokenIssuer()
        self.verify_url_template = verify_url_template
        self.password_hash_method = password_hash_method
        # Compared against when the email is unknown so both failures cost the same.
        self._dummy_hash = generate_password_hash(uuid.uuid4().hex, method=password_hash_method)

    def verification_url(self, unique_id: str) -> str:
        return self.verify_url_template.format(unique_id=unique_id)

    def register(self, fields: Mapping[str, Any]) -> RegistrationResult:
        """Create an unverified account and email its verification link.

        A ``MailDeliveryError`` from the mailer propagates after the user has
        been persisted; the record is kept so it can be re-sent later.
        """

        email = normalize_email(fields.get("email"))
        password = fields.get("password") or ""
        if not email or not password:
            raise ValidationError("Email and password are required.")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Email address is not valid.")
        if not isinstance(password, str):
            raise ValidationError("Password must be a string.")

        record = {key: fields.get(key) for key in PROFILE_FIELDS}
        record["date_of_birth"] = _parse_birth_date(fields.get("date_of_birth"))

        if self.store.find_by_email(email) is not None:
            logger.info("Registration refused, email already registered: %s", email)
            raise EmailTaken()

        unique_id = str(uuid.uuid4())
        record.update(
            email=email,
            unique_id=unique_id,
            password_hash=generate_password_hash(password, method=self.password_hash_method),
        )
        user_id = self.store.create(record)
        logger.info("Registered user %s (%s)", user_id, email)

        self.send_verification(email, record.get("first_name"), unique_id)
        return RegistrationResult(user_id=user_id, unique_id=unique_id, email=email)

    def send_verification(self, email: str, first_name: str | None, unique_id: str) -> None:
        html_body = render_verification_email(first_name, self.verification_url(unique_id))
        self.mailer.send(email, VERIFY_SUBJECT, html_body)

    def resend_verification(self, email: str) -> bool:
        """Re-send the link to an unverified user. Returns False if nothing was sent."""

        user = self.store.find_by_email(normalize_email(email))
        if user is None or user.is_verified:
            return False
        self.send_verification(user.email, user.first_name, user.unique_id)
        return True

    def verify_by_token(self, token: str) -> VerificationResult:
        user = self.store.find_by_unique_id(token)
        if user is None:
            raise VerificationTokenNotFound()
        if user.is_verified:
            return VerificationResult(VerificationOutcome.ALREADY_VERIFIED)

        # A concurrent request may have verified first; that is not an error.
        if self.store.mark_verified(token):
            logger.info("Verified user %s", user.id)
            return VerificationResult(VerificationOutcome.NEWLY_VERIFIED)
        return VerificationResult(VerificationOutcome.ALREADY_VERIFIED)

    def login(self, email: str | None, password: str | None) -> LoginResult:
        email = normalize_email(email)
        password = password or ""
        if not email or not password:
            raise ValidationError("Email and password are required.")
        if not isinstance(password, str):
            raise InvalidCredentials()

        user = self.store.find_by_email(email)
        if user is None:
            check_password_hash(self._dummy_hash, password)
            logger.warning("Login failed for %s", email)
            raise InvalidCredentials()

        if not user.is_verified:
            raise NotVerified()

        if not check_password_hash(user.password_hash, password):
            logger.warning("Login failed for %s", email)
            raise InvalidCredentials()

        claims = user.to_claims()
        token, expires_at = self.token_issuer.issue(claims)
        return LoginResult(token=token, claims=claims, expires_at=expires_at)
