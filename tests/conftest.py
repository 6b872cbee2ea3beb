from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the userhub package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from userhub.app import create_app  # noqa: E402
from userhub.core import config as core_config  # noqa: E402
from userhub.db import session as db_session  # noqa: E402
from userhub.db.create_tables import reset_all  # noqa: E402
from userhub.db.session import Base  # noqa: E402
from userhub.repositories.sql_repository import SQLRepository  # noqa: E402


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    reset_all()
    engine = db_session.get_engine()

    yield db_file

    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def repo(db_env):
    return SQLRepository()


@pytest.fixture()
def client(db_env):
    return TestClient(create_app())


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, name: str, email: str, password: str = "pw123") -> str:
    resp = client.post(
        "/v1/register",
        json={"name": name, "email": email, "password": password, "confirmPassword": password},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["token"]


def user_id(client: TestClient, token: str) -> int:
    return client.get("/v1/user", headers=bearer(token)).json()["data"]["id"]
