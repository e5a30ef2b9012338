"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Build Settings pointing at a temporary SQLite database
  - Build the application through create_app (same startup path as production)
  - Provide seeded accounts, sweets and bearer-token helpers

Notes:
  - SQLite transactions start with BEGIN IMMEDIATE, so seeding helpers use
    short-lived sessions and return plain ids: an idle session left open in a
    transaction would block the writes issued through the TestClient.
"""

from decimal import Decimal
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from sweetshop.core.config import Settings
from sweetshop.core.security import get_password_hash
from sweetshop.main import create_app
from sweetshop.models.sweet import Sweet
from sweetshop.models.user import Role
from sweetshop.repositories.user_repo import create_user

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'sweets.db'}",
        jwt_secret_key=TEST_SECRET,
        password_hash_rounds=4,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Le context manager déclenche le lifespan (connexion + création des tables)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_factory(app, client):
    return app.state.session_factory


@pytest.fixture
def db(session_factory):
    """Session longue, réservée aux tests de services sans appel HTTP"""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(session_factory) -> Callable[..., int]:
    def _make(email: str, password: str, role: Role = Role.USER) -> int:
        with session_factory() as session:
            return create_user(session, email, get_password_hash(password), role=role).id

    return _make


@pytest.fixture
def admin_id(make_user) -> int:
    return make_user("admin@example.com", "admin-pass", Role.ADMIN)


@pytest.fixture
def user_id(make_user) -> int:
    return make_user("user@example.com", "user-pass", Role.USER)


@pytest.fixture
def auth_header(app) -> Callable[..., dict]:
    def _header(user_id: int, role: str) -> dict:
        token = app.state.token_service.issue(user_id, role)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def admin_headers(admin_id, auth_header) -> dict:
    return auth_header(admin_id, Role.ADMIN.value)


@pytest.fixture
def user_headers(user_id, auth_header) -> dict:
    return auth_header(user_id, Role.USER.value)


@pytest.fixture
def make_sweet(session_factory) -> Callable[..., int]:
    def _make(name="Gummy", category="Candy", price="1.00", quantity=5) -> int:
        with session_factory() as session:
            sweet = Sweet(name=name, category=category, price=Decimal(price), quantity=quantity)
            session.add(sweet)
            session.commit()
            return sweet.id

    return _make


@pytest.fixture
def stored_quantity(session_factory) -> Callable[[int], int]:
    def _quantity(sweet_id: int):
        with session_factory() as session:
            sweet = session.get(Sweet, sweet_id)
            return None if sweet is None else sweet.quantity

    return _quantity
