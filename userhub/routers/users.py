from __future__ import annotations

from fastapi import APIRouter, Depends

from userhub.core.responses import success
from userhub.domain.policy import Actor
from userhub.schemas import UserOut, UserUpdateIn
from userhub.services.session_service import api_rate_limit, current_actor
from userhub.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(api_rate_limit)])
user_service = UserService()


@router.get("")
def list_users(actor: Actor = Depends(current_actor)):
    return success([UserOut.model_validate(user) for user in user_service.list_users(actor)])


@router.get("/{user_id}")
def show_user(user_id: int, actor: Actor = Depends(current_actor)):
    return success(UserOut.model_validate(user_service.view(actor, user_id)))


@router.patch("/{user_id}")
def update_user(user_id: int, payload: UserUpdateIn, actor: Actor = Depends(current_actor)):
    user_service.update(actor, user_id, name=payload.name, email=payload.email)
    return success("User updated successfully")


@router.delete("/{user_id}")
def soft_delete_user(user_id: int, actor: Actor = Depends(current_actor)):
    user_service.soft_delete(actor, user_id)
    return success("User soft-deleted successfully")


@router.patch("/{user_id}/restore")
def restore_user(user_id: int, actor: Actor = Depends(current_actor)):
    user_service.restore(actor, user_id)
    return success("User restored successfully")


@router.delete("/{user_id}/force-delete")
def force_delete_user(user_id: int, actor: Actor = Depends(current_actor)):
    user_service.force_delete(actor, user_id)
    return success("User permanently deleted successfully")
