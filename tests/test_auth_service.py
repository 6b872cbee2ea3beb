from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from userhub.core.errors import InvalidCredentials, Unauthenticated, ValidationError
from userhub.core.security import digest_token, verify_password
from userhub.services import session_service
from userhub.services.auth_service import AuthService


@pytest.fixture()
def svc(db_env):
    return AuthService()


def test_register_hashes_password_and_issues_token(svc, repo):
    result = svc.register("Alice", "a@x.com", "pw123", "pw123")
    assert result.email == "a@x.com"
    assert result.token

    user = repo.get_user_by_email("a@x.com")
    assert user.password_hash != "pw123"
    assert verify_password("pw123", user.password_hash)
    assert [t.name for t in repo.list_tokens(user.id)] == ["registerToken"]


def test_register_duplicate_email_creates_nothing(svc, repo):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    with pytest.raises(ValidationError) as exc_info:
        svc.register("Other", "a@x.com", "pw456", "pw456")
    assert exc_info.value.errors == {"email": ["The email has already been taken."]}
    assert len(repo.list_users()) == 1


def test_register_rejects_trashed_users_email(svc, repo):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    repo.soft_delete_user(repo.get_user_by_email("a@x.com").id)
    with pytest.raises(ValidationError):
        svc.register("Alice", "a@x.com", "pw123", "pw123")


def test_register_requires_matching_confirmation(svc, repo):
    with pytest.raises(ValidationError) as exc_info:
        svc.register("Alice", "a@x.com", "pw123", "pw124")
    assert "confirmPassword" in exc_info.value.errors
    assert repo.list_users() == []


def test_register_requires_fields(svc):
    with pytest.raises(ValidationError) as exc_info:
        svc.register("", "", "pw123", "pw123")
    assert set(exc_info.value.errors) == {"name", "email"}


def test_login_wrong_password_issues_no_token(svc, repo):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    user = repo.get_user_by_email("a@x.com")
    with pytest.raises(InvalidCredentials):
        svc.login("a@x.com", "wrong")
    assert len(repo.list_tokens(user.id)) == 1


def test_login_unknown_email_is_a_validation_error(svc):
    with pytest.raises(ValidationError) as exc_info:
        svc.login("nobody@x.com", "pw123")
    assert exc_info.value.errors == {"email": ["The selected email is invalid."]}


def test_login_refuses_trashed_user(svc, repo):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    repo.soft_delete_user(repo.get_user_by_email("a@x.com").id)
    with pytest.raises(InvalidCredentials):
        svc.login("a@x.com", "pw123")


def test_login_issues_distinct_tokens(svc):
    registered = svc.register("Alice", "a@x.com", "pw123", "pw123")
    first = svc.login("a@x.com", "pw123")
    second = svc.login("a@x.com", "pw123")
    assert len({registered.token, first.token, second.token}) == 3
    assert first.user.email == "a@x.com"


def test_logout_revokes_only_the_presented_token(svc):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    first = svc.login("a@x.com", "pw123").token
    second = svc.login("a@x.com", "pw123").token

    svc.logout(session_service.resolve_token(first))

    assert session_service.resolve_token(first) is None
    assert session_service.resolve_token(second) is not None


def test_logout_without_actor(svc):
    with pytest.raises(Unauthenticated):
        svc.logout(None)


@pytest.mark.parametrize(
    "plain",
    ["", "garbage", "abc|secret", "1|", "999|secret", "0|secret", "99999999999999999999|secret", "\u00b2|secret"],
)
def test_resolve_token_rejects_malformed_values(db_env, plain):
    assert session_service.resolve_token(plain) is None


def test_resolve_token_rejects_wrong_secret(svc):
    token = svc.register("Alice", "a@x.com", "pw123", "pw123").token
    token_id = token.split("|", 1)[0]
    assert session_service.resolve_token(f"{token_id}|not-the-secret") is None


def test_expired_token_is_rejected_and_removed(svc, repo):
    svc.register("Alice", "a@x.com", "pw123", "pw123")
    user = repo.get_user_by_email("a@x.com")
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    entity = repo.create_token(user.id, "loginToken", digest_token("s3cret"), expires_at=past)

    assert session_service.resolve_token(f"{entity.id}|s3cret") is None
    assert repo.get_token(entity.id) is None


def test_resolve_token_stamps_last_used(svc, repo):
    token = svc.register("Alice", "a@x.com", "pw123", "pw123").token
    ctx = session_service.resolve_token(token)
    assert ctx.user.email == "a@x.com"
    assert repo.get_token(ctx.token_id).last_used_at is not None


def test_token_ttl_sets_expiry(svc, repo, monkeypatch):
    from userhub.core import config as core_config

    monkeypatch.setenv("TOKEN_TTL_SECONDS", "3600")
    core_config.get_settings.cache_clear()
    token = svc.register("Alice", "a@x.com", "pw123", "pw123").token
    entity = repo.get_token(int(token.split("|", 1)[0]))
    assert entity.expires_at is not None
    core_config.get_settings.cache_clear()


def test_login_rehashes_outdated_password_hash(svc, repo):
    from argon2 import PasswordHasher

    weak_hash = PasswordHasher(time_cost=1).hash("pw123")
    user = repo.create_user("Alice", "a@x.com", weak_hash)

    svc.login("a@x.com", "pw123")

    stored = repo.get_user(user.id).password_hash
    assert stored != weak_hash
    assert verify_password("pw123", stored)
