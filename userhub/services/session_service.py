"""Access-token helpers (issue, resolve, revoke) and the request dependencies built on them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request

from userhub.core.config import get_settings
from userhub.core.errors import Forbidden, Unauthenticated
from userhub.core.rate_limiter import client_ip
from userhub.core.security import digest_token, new_token_secret, token_matches
from userhub.db.models import User
from userhub.domain.policy import Actor
from userhub.repositories.sql_repository import SQLRepository, valid_id

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = "|"
_UNRESOLVED = object()
_repo = SQLRepository()


@dataclass(frozen=True)
class AuthContext:
    """The resolved caller: its user row (possibly trashed) and the token it presented."""

    user: User
    token_id: int

    @property
    def actor(self) -> Actor:
        return Actor.from_user(self.user)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_token(user_id: int, name: str) -> str:
    """Persist a new token for the user and return its plaintext form ``<id>|<secret>``."""
    secret = new_token_secret()
    ttl = get_settings().token_ttl_seconds
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl) if ttl > 0 else None
    entity = _repo.create_token(user_id, name, digest_token(secret), expires_at)
    return f"{entity.id}{TOKEN_SEPARATOR}{secret}"


def resolve_token(plain: str | None) -> Optional[AuthContext]:
    token_id_raw, sep, secret = (plain or "").strip().partition(TOKEN_SEPARATOR)
    if not sep or not secret or not (token_id_raw.isascii() and token_id_raw.isdigit()):
        return None
    token_id = int(token_id_raw)
    if not valid_id(token_id):
        return None
    entity = _repo.get_token(token_id)
    if entity is None or not token_matches(secret, entity.token_hash):
        return None
    if entity.expires_at and _as_utc(entity.expires_at) <= datetime.now(timezone.utc):
        _repo.delete_token(entity.id)
        return None
    user = _repo.get_user(entity.user_id, with_trashed=True)
    if user is None:
        return None
    _repo.touch_token(entity.id)
    return AuthContext(user=user, token_id=entity.id)


def revoke_token(token_id: int) -> bool:
    """Remove a single token; other tokens of the same user stay valid."""
    return _repo.delete_token(token_id)


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


def resolve_request(request: Request) -> Optional[AuthContext]:
    """Resolve the bearer token once per request and cache the result on ``request.state``."""
    cached = getattr(request.state, "auth", _UNRESOLVED)
    if cached is not _UNRESOLVED:
        return cached
    ctx = resolve_token(bearer_token(request))
    request.state.auth = ctx
    return ctx


# -------------------------------------- dependencies --------------------------------------
def current_auth(request: Request) -> AuthContext:
    ctx = resolve_request(request)
    if ctx is None:
        raise Unauthenticated()
    return ctx


def current_actor(auth: AuthContext = Depends(current_auth)) -> Actor:
    return auth.actor


def require_admin(auth: AuthContext = Depends(current_auth)) -> AuthContext:
    if not auth.user.is_admin or auth.user.trashed:
        logger.warning("admin route refused for user %s", auth.user.id)
        raise Forbidden("You do not have permission to access this resource.")
    return auth


def api_rate_limit(request: Request) -> None:
    """Count the request against the caller's window, keyed by user id or client IP."""
    limiter = request.app.state.rate_limiter
    ctx = resolve_request(request)
    key = f"user:{ctx.user.id}" if ctx else f"ip:{client_ip(request)}"
    limiter.hit(key)
