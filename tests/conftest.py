import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from nurul_iman.auth import create_access_token, hash_password
from nurul_iman.bootstrap import create_app
from nurul_iman.config import Settings
from nurul_iman.models import Announcement, Role, User

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def png_bytes(size: int = 200_000) -> bytes:
    return PNG_HEADER + b"\0" * (size - len(PNG_HEADER))


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides) -> Settings:
        values = {
            "database_url": f"sqlite:///{tmp_path / 'test.db'}",
            "storage_backend": "local",
            "local_storage_dir": str(tmp_path / "images"),
            "secret_key": "test-secret",
            "log_level": "WARNING",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def app(make_settings):
    return create_app(make_settings())


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def images_dir(app) -> Path:
    return Path(app.state.settings.local_storage_dir)


@pytest.fixture
def make_user(app):
    """Create a user with the given role directly in the db; returns (id, auth headers)."""

    def _make(role_name: str, name: str = "Tester", email: str | None = None):
        with app.state.session_factory() as db:
            role = db.query(Role).filter(Role.role_name == role_name).first()
            if role is None:
                role = Role(role_name=role_name)
                db.add(role)
                db.flush()
            user = User(
                name=name,
                email=email or f"{role_name}-{uuid.uuid4().hex[:8]}@example.com",
                password=hash_password("secret123"),
                role_id=role.id,
            )
            db.add(user)
            db.commit()
            user_id = user.id
        token = create_access_token(user_id, app.state.settings)
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def count_announcements(app):
    def _count() -> int:
        with app.state.session_factory() as db:
            return db.query(Announcement).count()

    return _count
