"""Re-send the verification link to a registered but unverified user."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from services.errors import AuthError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="Address the account was registered with")
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        service = app.extensions["auth_service"]
        try:
            sent = service.resend_verification(args.email)
        except AuthError as exc:
            print(f"Could not send verification email: {exc.detail}", file=sys.stderr)
            return 1

    if not sent:
        print(f"No unverified account found for {args.email}")
        return 1
    print(f"Verification email sent to {args.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
