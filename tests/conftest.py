import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from usrmgr.app import create_app
from usrmgr.auth.passwords import hash_password
from usrmgr.auth.session import SessionManager
from usrmgr.config import AppConfig
from usrmgr.infra.avatar_store import AvatarStore
from usrmgr.infra.db import init_db, make_engine
from usrmgr.infra.user_repo import UserRepository
from usrmgr.models import UserDraft

SECRET = "test-secret-key-for-testing-purposes-only"


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    """Configuration pointing at a throwaway SQLite file and uploads dir."""
    return AppConfig(
        database_url=f"sqlite:///{tmp_path / 'users.db'}",
        secret_key=SECRET,
        uploads_dir=tmp_path / "uploads",
    )


@pytest.fixture()
def engine(app_config):
    eng = make_engine(app_config.database_url)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def users(engine) -> UserRepository:
    return UserRepository(engine)


@pytest.fixture()
def sessions() -> SessionManager:
    return SessionManager(SECRET)


@pytest.fixture()
def avatars(app_config) -> AvatarStore:
    store = AvatarStore(app_config.uploads_dir)
    store.ensure_dir()
    return store


@pytest.fixture()
def make_user(users):
    """Persist a user with a real argon2 hash of ``password``."""

    def _make(email: str = "ada@example.com", name: str = "Ada", password: str = "s3cret", **kw):
        draft = UserDraft(email=email, password_hash=hash_password(password), name=name, **kw)
        return users.create(draft)

    return _make


@pytest.fixture()
def client(app_config, engine) -> TestClient:
    return TestClient(create_app(app_config, engine=engine))
