"""
Shared fixtures.

Every test gets a fresh app with in-memory storage and an admin account
seeded through the bootstrap settings.
"""

import pytest
from fastapi.testclient import TestClient

from taskmanager.api.app import create_app
from taskmanager.auth.jwt import TokenService
from taskmanager.config import Settings
from taskmanager.storage import create_local_storage

from helpers import ADMIN_EMAIL, ADMIN_PASSWORD, Account, login, sign_up


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        jwt_access_secret="test-access-secret-0123456789abcdef",
        jwt_refresh_secret="test-refresh-secret-0123456789abcdef",
        bootstrap_admin_email=ADMIN_EMAIL,
        bootstrap_admin_password=ADMIN_PASSWORD,
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def token_service(settings):
    return TokenService.from_settings(settings)


@pytest.fixture
def app(settings, storage):
    return create_app(settings=settings, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


# =============================================================================
# Accounts
# =============================================================================


@pytest.fixture
def admin(client) -> Account:
    return Account(login(client, ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def ann(client) -> Account:
    return sign_up(client, "Ann", "ann@x.com")


@pytest.fixture
def bob(client) -> Account:
    return sign_up(client, "Bob", "bob@x.com")


@pytest.fixture
def carol(client) -> Account:
    return sign_up(client, "Carol", "carol@x.com")
