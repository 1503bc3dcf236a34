from __future__ import annotations

import os
import sys
from pathlib import Path

# Settings are read once at import; pin the environment before app imports.
os.environ.setdefault("APP_ENV", "test")

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.dependencies import get_password_service, memory_user_repo  # noqa: E402
from app.main import app  # noqa: E402
from app.repos.user_repo import InMemoryUserRepo  # noqa: E402
from app.services.password_service import PasswordService  # noqa: E402

# Minimal Argon2 parameters: same algorithm, a fraction of the CPU time.
FAST_PASSWORDS = PasswordService(1, memory_cost=8 * 1024, parallelism=1)

VALID_REGISTRATION = {
    "email": "ann.lee@example.com",
    "password": "abc12345",
    "firstName": "Ann",
    "lastName": "Lee",
}


@pytest.fixture(autouse=True)
def reset_users_state() -> None:
    memory_user_repo.clear()


@pytest.fixture(autouse=True)
def fast_password_hashing():
    app.dependency_overrides[get_password_service] = lambda: FAST_PASSWORDS
    yield
    app.dependency_overrides.pop(get_password_service, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def passwords() -> PasswordService:
    return FAST_PASSWORDS


@pytest.fixture
def repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


@pytest.fixture
def registration() -> dict[str, str]:
    """A valid POST /api/v1/users body; tests copy and tweak it."""
    return dict(VALID_REGISTRATION)
