"""
Authorization rules for user records.

``can()`` is a pure function of an actor snapshot, an operation and a target
id. It never touches storage; callers validate that the target exists and
perform the mutation themselves once access is granted.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from userhub.core.errors import Forbidden


class Operation(str, Enum):
    LIST_USERS = "list_users"
    LIST_ADMINS = "list_admins"
    SET_ADMIN = "set_admin"
    VIEW = "view"
    UPDATE = "update"
    SOFT_DELETE = "soft_delete"
    RESTORE = "restore"
    FORCE_DELETE = "force_delete"


NO_PERMISSION = "You do not have permission to perform this action"
ACCOUNT_DELETED = "Your account is deleted"

_ADMIN_ONLY = {Operation.LIST_USERS, Operation.LIST_ADMINS, Operation.SET_ADMIN}

# operation -> (admin may act on other users, denial reason)
_OWNER_RULES = {
    Operation.VIEW: (True, "You cannot view other users"),
    Operation.UPDATE: (True, "You cannot update other users"),
    Operation.SOFT_DELETE: (True, "You cannot delete other users"),
    Operation.RESTORE: (False, "You cannot restore other users"),
    Operation.FORCE_DELETE: (True, "You cannot delete other users"),
}

_TRASHED_ACTOR_OPERATIONS = {Operation.RESTORE, Operation.FORCE_DELETE}


@dataclass(frozen=True)
class Actor:
    """Snapshot of the authenticated caller."""

    id: int
    is_admin: bool = False
    deleted: bool = False

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(
            id=int(user.id),
            is_admin=bool(user.is_admin),
            deleted=getattr(user, "deleted_at", None) is not None,
        )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def can(actor: Actor, operation: Operation, target_id: Optional[int] = None) -> Decision:
    if actor.deleted:
        if operation not in _TRASHED_ACTOR_OPERATIONS or target_id != actor.id:
            return Decision(False, ACCOUNT_DELETED)
    if operation in _ADMIN_ONLY:
        return ALLOW if actor.is_admin else Decision(False, NO_PERMISSION)
    try:
        admin_override, reason = _OWNER_RULES[operation]
    except KeyError:
        raise ValueError(f"unknown operation: {operation!r}") from None
    if target_id is not None and target_id == actor.id:
        return ALLOW
    if admin_override and actor.is_admin:
        return ALLOW
    return Decision(False, reason)


def authorize(actor: Actor, operation: Operation, target_id: Optional[int] = None) -> None:
    """Raise ``Forbidden`` with the denial reason unless ``can()`` allows the call."""
    decision = can(actor, operation, target_id)
    if not decision.allowed:
        raise Forbidden(decision.reason)
