"""SQLAlchemy-backed identity store."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.user import User
from services.errors import EmailTaken, StorageError, VerificationTokenNotFound

from .abstract_store import IdentityStore

logger = logging.getLogger(__name__)

USER_FIELDS = (
    "unique_id",
    "first_name",
    "last_name",
    "email",
    "password_hash",
    "phone",
    "date_of_birth",
    "address",
    "travel_interests",
)


class SqlIdentityStore(IdentityStore):
    """Persist users through the application's Flask-SQLAlchemy session."""

    def __init__(self, database: SQLAlchemy):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def find_by_email(self, email: str) -> User | None:
        return self._first(select(User).where(User.email == email).limit(1))

    def find_by_unique_id(self, unique_id: str) -> User | None:
        return self._first(select(User).where(User.unique_id == unique_id).limit(1))

    def create(self, fields: Mapping[str, Any]) -> int:
        """Insert a new unverified user, relying on the UNIQUE constraints."""

        user = User(
            **{key: fields.get(key) for key in USER_FIELDS},
            is_verified=False,
        )
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("Rejected duplicate registration for %s", fields.get("email"))
            raise EmailTaken() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to insert user")
            raise StorageError() from exc
        return user.id

    def mark_verified(self, unique_id: str) -> bool:
        statement = (
            update(User)
            .where(User.unique_id == unique_id, User.is_verified.is_(False))
            .values(is_verified=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to mark user verified")
            raise StorageError() from exc

        if result.rowcount:
            return True
        if self.find_by_unique_id(unique_id) is None:
            raise VerificationTokenNotFound()
        return False

    def close(self) -> None:
        self.session.remove()
        self.db.engine.dispose()

    def _first(self, statement) -> User | None:
        try:
            return self.session.execute(statement).scalars().first()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Identity store lookup failed")
            raise StorageError() from exc
