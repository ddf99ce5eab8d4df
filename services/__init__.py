"""Identity services: registration, verification and login."""

from .auth_service import (
    AuthService,
    LoginResult,
    RegistrationResult,
    VerificationOutcome,
    VerificationResult,
)
from .mailer import ConsoleEmailSender, EmailSender, SmtpEmailSender, build_email_sender
from .tokens import SessionTokenIssuer

__all__ = [
    "AuthService",
    "LoginResult",
    "RegistrationResult",
    "VerificationOutcome",
    "VerificationResult",
    "ConsoleEmailSender",
    "EmailSender",
    "SmtpEmailSender",
    "build_email_sender",
    "SessionTokenIssuer",
]
