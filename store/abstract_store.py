"""Identity store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from models.user import User


class IdentityStore(ABC):
    """Interface for durable user storage consumed by the auth service."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email`` or ``None``."""

    @abstractmethod
    def find_by_unique_id(self, unique_id: str) -> User | None:
        """Return the user owning the verification token or ``None``."""

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> int:
        """Insert an unverified user and return its id.

        Raises ``EmailTaken`` when the email is already stored. The check must
        be made atomically by the backend, not by a prior lookup.
        """

    @abstractmethod
    def mark_verified(self, unique_id: str) -> bool:
        """Flag the token owner as verified.

        Returns ``True`` if the flag changed and ``False`` if the user was
        already verified. Raises ``VerificationTokenNotFound`` for unknown tokens.
        """

    def close(self) -> None:
        """Release backend resources."""
