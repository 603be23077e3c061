import os
import sys

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENV", "dev")
# disable seeding, tests create the users they need
os.environ.setdefault("SEED_ENABLED", "false")
os.environ.setdefault("AUDIT_ENABLED", "true")

import gmpanel.models  # noqa: E402,F401
from gmpanel.db.base import Base  # noqa: E402
from gmpanel.db.session import SessionLocal, engine  # noqa: E402

# replace bcrypt hashing/verifying with cheap functions
from gmpanel.core import security  # noqa: E402

security.pwd_context.hash = lambda pw: f"hashed:{pw[:72]}"
security.pwd_context.verify = lambda plain, hashed: hashed == f"hashed:{plain[:72]}"

from gmpanel.models.role import Role  # noqa: E402
from gmpanel.models.user import User  # noqa: E402
from gmpanel.models.user_profile import UserProfile  # noqa: E402

from main import app  # noqa: E402

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def create_user(username: str, password: str, roles: list[str], call_name: str | None = None) -> int:
    db = SessionLocal()
    try:
        user = User(
            username=username,
            hashed_password=security.hash_password(password),
            is_active=True,
        )
        for name in roles:
            role = db.query(Role).filter(Role.name == name).first()
            if not role:
                role = Role(name=name)
                db.add(role)
            user.roles.append(role)
        db.add(user)
        db.flush()
        if call_name:
            db.add(UserProfile(user_id=user.id, call_name=call_name))
        db.commit()
        return user.id
    finally:
        db.close()


def login(client, username: str = "admin", password: str = "admin123", **kwargs):
    return client.post(
        "/api/v1/auth/login",
        json={"username": username, "password": password},
        **kwargs,
    )


@pytest.fixture()
def client():
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def admin_user(client) -> int:
    return create_user("admin", "admin123", ["ADMIN"], call_name="Administrator")


@pytest.fixture()
def admin_headers(client, admin_user) -> dict[str, str]:
    response = login(client, headers={"User-Agent": CHROME_UA})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
