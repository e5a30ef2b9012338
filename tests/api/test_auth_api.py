"""
Name: Registration and Login Endpoint Tests

Responsibilities:
  - Register returns 201 {id, email, role} without any password material
  - Duplicate email is 409, missing fields are 400
  - Login returns a token carrying the user id and role
  - Unknown email and wrong password give the same 401 body
"""

import pytest

from sweetshop.core.security import verify_password
from sweetshop.models.user import User

pytestmark = pytest.mark.api

REGISTER = "/api/auth/register"
LOGIN = "/api/auth/login"


def test_register_returns_public_fields_only(client, session_factory):
    response = client.post(REGISTER, json={"email": "alice@example.com", "password": "pa55word"})

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"id", "email", "role"}
    assert body["email"] == "alice@example.com"
    assert body["role"] == "USER"

    with session_factory() as session:
        stored = session.get(User, body["id"])
        assert stored.password_hash != "pa55word"
        assert verify_password("pa55word", stored.password_hash)


def test_register_duplicate_email_is_conflict(client):
    first = client.post(REGISTER, json={"email": "bob@example.com", "password": "one"})
    second = client.post(REGISTER, json={"email": "bob@example.com", "password": "two"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert "error" in second.json()


def test_email_is_case_sensitive_as_stored(client):
    client.post(REGISTER, json={"email": "carol@example.com", "password": "pw"})

    response = client.post(REGISTER, json={"email": "Carol@example.com", "password": "pw"})

    assert response.status_code == 201


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": "dave@example.com"},
        {"password": "pw"},
        {"email": "", "password": "pw"},
        {"email": "dave@example.com", "password": ""},
    ],
)
def test_register_missing_fields(client, payload):
    response = client.post(REGISTER, json=payload)

    assert response.status_code == 400
    assert set(response.json()) == {"error"}


def test_login_returns_token_with_identity(client, app):
    created = client.post(REGISTER, json={"email": "erin@example.com", "password": "secret"}).json()

    response = client.post(LOGIN, json={"email": "erin@example.com", "password": "secret"})

    assert response.status_code == 200
    token = response.json()["token"]
    payload = app.state.token_service.verify(token)
    assert payload.user_id == created["id"]
    assert payload.role == "USER"


def test_login_admin_token_carries_admin_role(client, app, admin_id):
    response = client.post(LOGIN, json={"email": "admin@example.com", "password": "admin-pass"})

    assert response.status_code == 200
    payload = app.state.token_service.verify(response.json()["token"])
    assert payload.user_id == admin_id
    assert payload.role == "ADMIN"


def test_login_failures_are_indistinguishable(client, user_id):
    wrong_password = client.post(LOGIN, json={"email": "user@example.com", "password": "nope"})
    unknown_email = client.post(LOGIN, json={"email": "ghost@example.com", "password": "nope"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert "token" not in wrong_password.json()
    assert "password" not in wrong_password.json()


@pytest.mark.parametrize("payload", [{}, {"email": "user@example.com"}, {"password": "x"}])
def test_login_missing_fields(client, payload):
    response = client.post(LOGIN, json=payload)

    assert response.status_code == 400


def test_register_rejects_malformed_json(client):
    response = client.post(
        REGISTER, content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert set(response.json()) == {"error"}
