from __future__ import annotations

import pytest

from userhub.core.errors import Forbidden
from userhub.domain.policy import ACCOUNT_DELETED, NO_PERMISSION, Actor, Operation, authorize, can

USER = Actor(id=1)
ADMIN = Actor(id=9, is_admin=True)

OWNER_OPERATIONS = [
    Operation.VIEW,
    Operation.UPDATE,
    Operation.SOFT_DELETE,
    Operation.RESTORE,
    Operation.FORCE_DELETE,
]


@pytest.mark.parametrize("operation", OWNER_OPERATIONS)
def test_actor_may_act_on_own_record(operation):
    assert can(USER, operation, USER.id).allowed


@pytest.mark.parametrize("operation", OWNER_OPERATIONS)
def test_regular_user_cannot_act_on_others(operation):
    decision = can(USER, operation, 2)
    assert not decision.allowed
    assert decision.reason.startswith("You cannot")


@pytest.mark.parametrize(
    "operation",
    [Operation.VIEW, Operation.UPDATE, Operation.SOFT_DELETE, Operation.FORCE_DELETE],
)
def test_admin_overrides_ownership(operation):
    assert can(ADMIN, operation, 2).allowed


def test_restore_has_no_admin_override():
    decision = can(ADMIN, Operation.RESTORE, 2)
    assert not decision.allowed
    assert decision.reason == "You cannot restore other users"
    assert can(ADMIN, Operation.RESTORE, ADMIN.id).allowed


def test_admin_may_view_itself():
    assert can(ADMIN, Operation.VIEW, ADMIN.id).allowed


@pytest.mark.parametrize("operation", [Operation.LIST_ADMINS, Operation.SET_ADMIN, Operation.LIST_USERS])
def test_admin_only_operations(operation):
    assert can(ADMIN, operation, 2).allowed
    denied = can(USER, operation, USER.id)
    assert not denied
    assert denied.reason == NO_PERMISSION


def test_trashed_actor_limited_to_own_restore_and_force_delete():
    trashed = Actor(id=5, is_admin=True, deleted=True)
    assert can(trashed, Operation.RESTORE, 5).allowed
    assert can(trashed, Operation.FORCE_DELETE, 5).allowed
    assert can(trashed, Operation.FORCE_DELETE, 6).reason == ACCOUNT_DELETED
    assert can(trashed, Operation.VIEW, 5).reason == ACCOUNT_DELETED
    assert can(trashed, Operation.LIST_ADMINS).reason == ACCOUNT_DELETED


def test_authorize_raises_forbidden_with_reason():
    with pytest.raises(Forbidden) as exc_info:
        authorize(USER, Operation.UPDATE, 3)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "You cannot update other users"
    authorize(USER, Operation.UPDATE, USER.id)


def test_actor_from_user_row():
    class Row:
        id = 4
        is_admin = True
        deleted_at = None

    assert Actor.from_user(Row()) == Actor(id=4, is_admin=True, deleted=False)
