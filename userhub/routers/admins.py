from __future__ import annotations

from fastapi import APIRouter, Depends

from userhub.core.responses import success
from userhub.schemas import AdminStatusIn, UserOut
from userhub.services.session_service import AuthContext, api_rate_limit, require_admin
from userhub.services.user_service import UserService

router = APIRouter(prefix="/v1", tags=["admins"], dependencies=[Depends(api_rate_limit)])
user_service = UserService()


@router.get("/admins")
def list_admins(auth: AuthContext = Depends(require_admin)):
    admins = user_service.list_admins(auth.actor)
    return success([UserOut.model_validate(user) for user in admins])


@router.patch("/users/{user_id}")
def update_admin_status(user_id: int, payload: AdminStatusIn, auth: AuthContext = Depends(require_admin)):
    user_service.set_admin_status(auth.actor, user_id, payload.is_admin)
    return success("Admin status updated successfully")
