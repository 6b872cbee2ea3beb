"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Mapping, Sequence


class ApiError(Exception):
    """Base class for errors that map to a JSON error envelope."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None, errors: Mapping[str, Sequence[str]] | None = None):
        self.message = message or self.default_message
        self.errors = {field: list(msgs) for field, msgs in (errors or {}).items()}
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 422
    default_message = "Validation Error"

    @classmethod
    def field(cls, name: str, message: str) -> "ValidationError":
        return cls(errors={name: [message]})


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthenticated."


class InvalidCredentials(ApiError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class RateLimited(ApiError):
    status_code = 429
    default_message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int, message: str | None = None):
        super().__init__(message)
        self.retry_after = retry_after


EMAIL_TAKEN = "The email has already been taken."


def invalid_id() -> ValidationError:
    return ValidationError.field("id", "The selected id is invalid.")
