#!/usr/bin/env python3
"""
Grant or revoke the admin flag directly in the database.

The HTTP promotion endpoint requires an existing admin, so the first one has
to be created here.

Usage:
  python scripts/make_admin.py --email someone@example.com [--revoke]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the userhub package importable when run directly from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userhub.db.create_tables import create_all
from userhub.repositories.sql_repository import SQLRepository


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Grant or revoke the admin flag of a user")
    ap.add_argument("--email", required=True, help="Email of an existing, non-deleted user")
    ap.add_argument("--revoke", action="store_true", help="Remove the admin flag instead of granting it")
    args = ap.parse_args(argv)

    create_all()
    repo = SQLRepository()
    email = (args.email or "").strip()
    user = repo.get_user_by_email(email)
    if user is None:
        raise SystemExit(f"User '{email}' does not exist or is deleted")

    updated = repo.set_admin(user.id, not args.revoke)
    if updated is None:
        raise SystemExit(f"User '{email}' could not be updated")
    print("OK: admin flag updated")
    print(f"  ID: {updated.id}")
    print(f"  Email: {updated.email}")
    print(f"  is_admin: {updated.is_admin}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
