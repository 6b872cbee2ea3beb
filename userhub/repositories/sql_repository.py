"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update, delete

from userhub.db.models import AccessToken, User
from userhub.db.session import get_session

MAX_ID = 2**63 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def valid_id(value: int) -> bool:
    """Ids outside the signed 64-bit INTEGER range can never match a row."""
    return 1 <= value <= MAX_ID


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session.

    Every method opens its own session and commits at most one logical
    mutation. Returned ORM objects are detached; relationships are not loaded.
    """

    # -------------------------- users --------------------------
    def get_user(self, user_id: int, *, with_trashed: bool = False) -> Optional[User]:
        if not valid_id(user_id):
            return None
        with get_session() as session:
            user = session.get(User, user_id)
            if user is None or (user.trashed and not with_trashed):
                return None
            return user

    def get_user_by_email(self, email: str, *, with_trashed: bool = False) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        if not with_trashed:
            stmt = stmt.where(User.deleted_at.is_(None))
        with get_session() as session:
            return session.execute(stmt).scalar_one_or_none()

    def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Email uniqueness spans trashed users as well as active ones."""
        stmt = select(User.id).where(User.email == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        with get_session() as session:
            return session.execute(stmt.limit(1)).first() is not None

    def create_user(self, name: str, email: str, password_hash: str, *, is_admin: bool = False) -> User:
        now = _utcnow()
        entity = User(
            name=name,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def list_users(self) -> list[User]:
        with get_session() as session:
            stmt = select(User).where(User.deleted_at.is_(None)).order_by(User.id)
            return session.execute(stmt).scalars().all()

    def list_admins(self) -> list[User]:
        with get_session() as session:
            stmt = (
                select(User)
                .where(User.is_admin.is_(True), User.deleted_at.is_(None))
                .order_by(User.id)
            )
            return session.execute(stmt).scalars().all()

    def update_user(self, user_id: int, *, name: str | None = None, email: str | None = None) -> Optional[User]:
        with get_session() as session:
            user = session.get(User, user_id)
            if user is None or user.trashed:
                return None
            if name is not None:
                user.name = name
            if email is not None:
                user.email = email
            user.updated_at = _utcnow()
            session.commit()
            session.refresh(user)
            return user

    def update_user_password(self, user_id: int, password_hash: str) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash, updated_at=_utcnow())
            )
            session.execute(stmt)
            session.commit()

    def set_admin(self, user_id: int, is_admin: bool) -> Optional[User]:
        with get_session() as session:
            user = session.get(User, user_id)
            if user is None or user.trashed:
                return None
            user.is_admin = bool(is_admin)
            user.updated_at = _utcnow()
            session.commit()
            session.refresh(user)
            return user

    def soft_delete_user(self, user_id: int) -> bool:
        now = _utcnow()
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id, User.deleted_at.is_(None))
                .values(deleted_at=now, updated_at=now)
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def restore_user(self, user_id: int) -> bool:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id, User.deleted_at.is_not(None))
                .values(deleted_at=None, updated_at=_utcnow())
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def force_delete_user(self, user_id: int) -> bool:
        with get_session() as session:
            session.execute(delete(AccessToken).where(AccessToken.user_id == user_id))
            result = session.execute(delete(User).where(User.id == user_id))
            session.commit()
            return result.rowcount == 1

    # -------------------------- tokens --------------------------
    def create_token(
        self,
        user_id: int,
        name: str,
        token_hash: str,
        expires_at: datetime | None = None,
    ) -> AccessToken:
        entity = AccessToken(
            user_id=user_id,
            name=name,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=_utcnow(),
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_token(self, token_id: int) -> Optional[AccessToken]:
        if not valid_id(token_id):
            return None
        with get_session() as session:
            return session.get(AccessToken, token_id)

    def list_tokens(self, user_id: int) -> list[AccessToken]:
        with get_session() as session:
            stmt = select(AccessToken).where(AccessToken.user_id == user_id).order_by(AccessToken.id)
            return session.execute(stmt).scalars().all()

    def touch_token(self, token_id: int) -> None:
        with get_session() as session:
            stmt = update(AccessToken).where(AccessToken.id == token_id).values(last_used_at=_utcnow())
            session.execute(stmt)
            session.commit()

    def delete_token(self, token_id: int) -> bool:
        with get_session() as session:
            result = session.execute(delete(AccessToken).where(AccessToken.id == token_id))
            session.commit()
            return result.rowcount == 1
