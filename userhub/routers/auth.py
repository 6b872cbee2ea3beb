from __future__ import annotations

from fastapi import APIRouter, Depends

from userhub.core.responses import success
from userhub.schemas import LoginIn, RegisterIn, UserOut
from userhub.services.auth_service import AuthService
from userhub.services.session_service import AuthContext, api_rate_limit, current_auth

router = APIRouter(prefix="/v1", tags=["auth"], dependencies=[Depends(api_rate_limit)])
auth_service = AuthService()


@router.get("/test")
def smoke_test():
    return success("test success")


@router.post("/register")
def register(payload: RegisterIn):
    result = auth_service.register(payload.name, payload.email, payload.password, payload.confirm_password)
    return success({"name": result.name, "email": result.email, "token": result.token})


@router.post("/login")
def login(payload: LoginIn):
    result = auth_service.login(payload.email, payload.password)
    return success({"user": UserOut.model_validate(result.user), "token": result.token})


@router.post("/logout")
def logout(auth: AuthContext = Depends(current_auth)):
    auth_service.logout(auth)
    return success("Logged out successfully")


@router.get("/user")
def current_user(auth: AuthContext = Depends(current_auth)):
    return success(UserOut.model_validate(auth.user))
