"""Security helpers (password hashing and access-token secrets)."""

from __future__ import annotations

import hashlib
import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Create an Argon2 hash for the given plaintext."""
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    """True when the hash was produced with outdated Argon2 parameters."""
    return _ph.check_needs_rehash(stored_hash)


def new_token_secret() -> str:
    return secrets.token_urlsafe(32)


def digest_token(secret: str) -> str:
    return hashlib.sha256(secret.encode()).hexdigest()


def token_matches(secret: str, stored_digest: str | None) -> bool:
    return secrets.compare_digest(digest_token(secret), stored_digest or "")
