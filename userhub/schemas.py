from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1)
    confirm_password: str = Field(min_length=1, alias="confirmPassword")


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserUpdateIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None


class AdminStatusIn(BaseModel):
    is_admin: bool


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    is_admin: bool
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
