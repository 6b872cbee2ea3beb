"""Create (or with ``--reset`` rebuild) the users/access_tokens schema."""
from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # registers User/AccessToken on the metadata

logger = logging.getLogger(__name__)


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


def reset_all() -> None:
    """Drop every table and recreate it. Destroys all users and tokens."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.warning("schema rebuilt on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Create the userhub database schema")
    ap.add_argument("--reset", action="store_true", help="Drop existing tables first")
    args = ap.parse_args()
    try:
        if args.reset:
            reset_all()
        else:
            create_all()
        print("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
