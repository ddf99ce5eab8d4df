"""User model definition."""

from datetime import datetime

from sqlalchemy import false
from werkzeug.security import check_password_hash, generate_password_hash

from . import db


class User(db.Model):
    """Represents a registered traveller."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    unique_id = db.Column(db.String(36), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    address = db.Column(db.String(255), nullable=True)
    travel_interests = db.Column(db.JSON, nullable=True)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def set_password(self, password: str, method: str = "scrypt") -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password, method=method)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def mark_verified(self) -> None:
        """Mark the user's email address as verified."""

        self.is_verified = True

    def to_claims(self) -> dict:
        """Return the identity claims carried by a session token."""

        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
