"""Seed a verified demo traveller."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db
from models.user import User

DEMO_EMAIL = "alice@example.com"
DEMO_PASSWORD = "secret123"


def main() -> None:
    app = create_app()
    method = app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    with app.app_context():
        user = User.query.filter_by(email=DEMO_EMAIL).first()
        if user is None:
            user = User(
                email=DEMO_EMAIL,
                unique_id=str(uuid.uuid4()),
                first_name="Alice",
                last_name="Traveller",
                travel_interests=["hiking", "food"],
                is_verified=True,
            )
            user.set_password(DEMO_PASSWORD, method=method)
            db.session.add(user)
            action = "created"
        else:
            user.mark_verified()
            user.set_password(DEMO_PASSWORD, method=method)
            action = "updated"
        db.session.commit()
        print(f"Demo user {action}: {DEMO_EMAIL}")


if __name__ == "__main__":
    main()
