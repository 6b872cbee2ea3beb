"""
Authentication use cases: registration, login and logout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from userhub.core.errors import EMAIL_TAKEN, InvalidCredentials, Unauthenticated, ValidationError
from userhub.core.security import hash_password, needs_rehash, verify_password
from userhub.db.models import User
from userhub.repositories.sql_repository import SQLRepository
from userhub.services.session_service import AuthContext, issue_token, revoke_token

logger = logging.getLogger(__name__)

REGISTER_TOKEN_NAME = "registerToken"
LOGIN_TOKEN_NAME = "loginToken"


@dataclass
class RegisterResult:
    name: str
    email: str
    token: str


@dataclass
class LoginResult:
    user: User
    token: str


def _required(**fields: str) -> None:
    missing = {name: [f"The {name} field is required."] for name, value in fields.items() if not value}
    if missing:
        raise ValidationError(errors=missing)


@dataclass
class AuthService:
    """Handles registration, login and token revocation."""

    def __post_init__(self):
        self.repository = SQLRepository()

    # -------------------------------------- registration --------------------------------------
    def register(self, name: str, email: str, password: str, confirm_password: str) -> RegisterResult:
        raw_name = (name or "").strip()
        raw_email = (email or "").strip()
        _required(name=raw_name, email=raw_email, password=password or "", confirmPassword=confirm_password or "")
        if confirm_password != password:
            raise ValidationError.field("confirmPassword", "The confirm password field must match password.")
        if self.repository.email_taken(raw_email):
            raise ValidationError.field("email", EMAIL_TAKEN)
        try:
            user = self.repository.create_user(raw_name, raw_email, hash_password(password))
        except IntegrityError:
            # lost a race against a concurrent registration
            raise ValidationError.field("email", EMAIL_TAKEN) from None
        token = issue_token(user.id, REGISTER_TOKEN_NAME)
        logger.info("registered user %s", user.id)
        return RegisterResult(name=user.name, email=user.email, token=token)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginResult:
        raw_email = (email or "").strip()
        _required(email=raw_email, password=password or "")
        user = self.repository.get_user_by_email(raw_email, with_trashed=True)
        if user is None:
            raise ValidationError.field("email", "The selected email is invalid.")
        if user.trashed or not verify_password(password, user.password_hash):
            logger.info("rejected login for user %s", user.id)
            raise InvalidCredentials()
        if needs_rehash(user.password_hash):
            self.repository.update_user_password(user.id, hash_password(password))
        token = issue_token(user.id, LOGIN_TOKEN_NAME)
        return LoginResult(user=user, token=token)

    # -------------------------------------- logout --------------------------------------
    def logout(self, auth: Optional[AuthContext]) -> None:
        """Revoke only the token presented on this request."""
        if auth is None:
            raise Unauthenticated("User not authenticated")
        revoke_token(auth.token_id)
        logger.info("revoked token %s for user %s", auth.token_id, auth.user.id)
