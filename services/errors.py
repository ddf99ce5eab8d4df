"""Domain errors raised by the identity services."""

from __future__ import annotations

from http import HTTPStatus


class AuthError(Exception):
    """Base class for errors the HTTP layer renders as JSON."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    default_detail: str = "An unexpected error occurred."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AuthError):
    status_code = HTTPStatus.BAD_REQUEST
    error = "Bad Request"
    default_detail = "The request is invalid."


class EmailTaken(AuthError):
    """An account already exists for the submitted email."""

    status_code = HTTPStatus.BAD_REQUEST
    error = "Conflict"
    default_detail = "Email already registered."


class VerificationTokenNotFound(AuthError):
    status_code = HTTPStatus.NOT_FOUND
    error = "Not Found"
    default_detail = "Invalid verification link."


class InvalidCredentials(AuthError):
    """Unknown email or wrong password; callers cannot tell which."""

    status_code = HTTPStatus.BAD_REQUEST
    error = "Invalid Credentials"
    default_detail = "Invalid email or password."


class NotVerified(AuthError):
    status_code = HTTPStatus.FORBIDDEN
    error = "Forbidden"
    default_detail = "Please verify your email before logging in."


class MailDeliveryError(AuthError):
    """The account was saved but the verification email was not sent."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    error = "Mail Delivery Failed"
    default_detail = "Registration was saved but the verification email could not be sent."


class StorageError(AuthError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    error = "Internal Server Error"
    default_detail = "A server error occurred. Please try again later."


# Names used by the identity store contract.
Conflict = EmailTaken
NotFound = VerificationTokenNotFound
