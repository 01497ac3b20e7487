"""Create a password user for Tinvest.

Usage:
    python -m app.scripts.create_user --email you@example.com --password <password> [--name "Your Name"]
"""

from __future__ import annotations

import argparse
import sys

from app.db.session import SessionLocal
from app.services.auth import create_user, get_user_by_email, validate_credentials
from app.services.errors import ConflictError, ValidationError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create a Tinvest user")
    parser.add_argument("--email", required=True, help="Email address for the new user")
    parser.add_argument("--password", required=True, help="Password for the new user")
    parser.add_argument("--name", default=None, help="Display name")
    args = parser.parse_args(argv)

    try:
        validate_credentials(args.email.strip().lower(), args.password)
    except ValidationError as exc:
        for err in exc.errors:
            print(f"{err['field']}: {err['message']}")
        sys.exit(2)

    db = SessionLocal()
    try:
        # Check if user already exists
        if get_user_by_email(db, args.email):
            print(f"User '{args.email}' already exists.")
            sys.exit(1)

        try:
            user = create_user(db, args.email, args.password, args.name)
        except ConflictError:
            print(f"User '{args.email}' already exists.")
            sys.exit(1)
        print(f"User '{user.email}' created successfully (id={user.id}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
