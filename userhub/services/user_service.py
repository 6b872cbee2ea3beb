"""
User lifecycle use cases gated by the authorization policy.

Each method validates the target id first, then asks the policy, and only
then performs its single-row mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from userhub.core.errors import EMAIL_TAKEN, Forbidden, ValidationError, invalid_id
from userhub.db.models import User
from userhub.domain.policy import Actor, Operation, authorize
from userhub.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class UserService:
    def __post_init__(self):
        self.repository = SQLRepository()

    # -------------------------------------- helpers --------------------------------------
    def _authorize(self, actor: Actor, operation: Operation, target_id: Optional[int] = None) -> None:
        try:
            authorize(actor, operation, target_id)
        except Forbidden as exc:
            logger.warning("denied %s by user %s on %s: %s", operation.value, actor.id, target_id, exc.message)
            raise

    def _target(self, user_id: int, *, with_trashed: bool = False) -> User:
        user = self.repository.get_user(user_id, with_trashed=with_trashed)
        if user is None:
            raise invalid_id()
        return user

    # -------------------------------------- reads --------------------------------------
    def list_users(self, actor: Actor) -> list[User]:
        self._authorize(actor, Operation.LIST_USERS)
        return self.repository.list_users()

    def list_admins(self, actor: Actor) -> list[User]:
        self._authorize(actor, Operation.LIST_ADMINS)
        return self.repository.list_admins()

    def view(self, actor: Actor, user_id: int) -> User:
        user = self._target(user_id)
        self._authorize(actor, Operation.VIEW, user_id)
        return user

    # -------------------------------------- mutations --------------------------------------
    def update(self, actor: Actor, user_id: int, *, name: str | None = None, email: str | None = None) -> User:
        self._target(user_id)
        self._authorize(actor, Operation.UPDATE, user_id)
        name = name.strip() if name is not None else None
        email = email.strip() if email is not None else None
        if not name and not email:
            raise ValidationError("No fields to update")
        if email and self.repository.email_taken(email, exclude_id=user_id):
            raise ValidationError.field("email", EMAIL_TAKEN)
        try:
            user = self.repository.update_user(user_id, name=name or None, email=email or None)
        except IntegrityError:
            raise ValidationError.field("email", EMAIL_TAKEN) from None
        if user is None:
            raise invalid_id()
        logger.info("user %s updated by %s", user_id, actor.id)
        return user

    def set_admin_status(self, actor: Actor, user_id: int, is_admin: bool) -> User:
        self._target(user_id)
        self._authorize(actor, Operation.SET_ADMIN, user_id)
        user = self.repository.set_admin(user_id, is_admin)
        if user is None:
            raise invalid_id()
        logger.info("admin flag of user %s set to %s by %s", user_id, bool(is_admin), actor.id)
        return user

    def soft_delete(self, actor: Actor, user_id: int) -> None:
        self._target(user_id)
        self._authorize(actor, Operation.SOFT_DELETE, user_id)
        if not self.repository.soft_delete_user(user_id):
            raise invalid_id()
        logger.info("user %s soft-deleted by %s", user_id, actor.id)

    def restore(self, actor: Actor, user_id: int) -> None:
        user = self._target(user_id, with_trashed=True)
        self._authorize(actor, Operation.RESTORE, user_id)
        if not user.trashed or not self.repository.restore_user(user_id):
            raise ValidationError.field("id", "The user is not deleted.")
        logger.info("user %s restored by %s", user_id, actor.id)

    def force_delete(self, actor: Actor, user_id: int) -> None:
        self._target(user_id, with_trashed=True)
        self._authorize(actor, Operation.FORCE_DELETE, user_id)
        if not self.repository.force_delete_user(user_id):
            raise invalid_id()
        logger.info("user %s permanently deleted by %s", user_id, actor.id)
