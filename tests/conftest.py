# tests/conftest.py
import os
import tempfile

# Settings and loggers read the environment at import time
_LOG_DIR = tempfile.mkdtemp(prefix="acl-logs-")
os.environ.setdefault("LOG_DIR", _LOG_DIR)
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("APP_ENV", "cloud")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.config import settings  # noqa: E402
from services.privileges import PrivilegeMappingRegistry, PrivilegeResolver  # noqa: E402
from services.role_editor import RoleRepository, VerificationContext  # noqa: E402

REQUIRED = ["language:read", "locale:read"]

SYSTEM_ENTRY = {
    "category": "additional_permissions",
    "parent": None,
    "key": "system",
    "roles": {
        "clear_cache": {
            "privileges": ["system:clear:cache"],
            "dependencies": [],
        }
    },
}

ORDERS_ENTRY = {
    "category": "additional_permissions",
    "parent": None,
    "key": "orders",
    "roles": {
        "create_discounts": {
            "privileges": ["order:create:discount"],
            "dependencies": [],
        }
    },
}


def make_resolver(*entries: dict, required=REQUIRED) -> PrivilegeResolver:
    registry = PrivilegeMappingRegistry()
    for entry in entries:
        registry.add_privilege_mapping_entry(entry)
    registry.freeze()
    return PrivilegeResolver(registry, required)


@pytest.fixture
def resolver() -> PrivilegeResolver:
    """Resolver over the system and orders mappings."""
    return make_resolver(SYSTEM_ENTRY, ORDERS_ENTRY)


@pytest.fixture
def role_repository():
    """A mock backing store returning a role with no privileges."""
    repo = MagicMock(spec=RoleRepository)
    repo.get = AsyncMock(return_value={"privileges": []})
    repo.save = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def verification() -> VerificationContext:
    return VerificationContext(user_id="u1", access="1a2b3c")


@pytest.fixture
def client(tmp_path, monkeypatch):
    """
    FastAPI TestClient on a fresh SQLite database.

    The lifespan builds the privilege mappings, creates the tables and seeds
    the super admin from settings.
    """
    monkeypatch.setattr(
        settings, "DATABASE_URL_OVERRIDE", f"sqlite+aiosqlite:///{tmp_path / 'acl.db'}"
    )
    from main import create_app

    with TestClient(create_app()) as c:
        yield c


def login(client: TestClient, username: str, password: str) -> dict:
    response = client.post(
        "/api/v1/admin-login/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client) -> dict:
    return login(client, settings.SUPERADMIN_USERNAME, settings.SUPERADMIN_PASSWORD)


@pytest.fixture
def login_as_user_with_permissions(client, admin_headers):
    """Create a role from role paths, a user bound to it, and log that user in."""
    counter = {"n": 0}

    def _login(selected_roles: list, password: str = "Secret123!") -> dict:
        counter["n"] += 1
        n = counter["n"]
        role = client.post(
            "/api/v1/acl-roles",
            json={"role_name": f"Test role {n}", "selected_roles": selected_roles},
            headers=admin_headers,
        )
        assert role.status_code == 201, role.text
        role_id = role.json()["data"]["role_id"]

        user = client.post(
            "/api/v1/admin-users",
            json={
                "username": f"tester{n}",
                "email": f"tester{n}@example.com",
                "password": password,
                "acl_role_id": role_id,
            },
            headers=admin_headers,
        )
        assert user.status_code == 201, user.text
        return login(client, f"tester{n}", password)

    return _login
