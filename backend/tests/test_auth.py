"""Tests for bearer-token authentication and role checks."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.core.auth import (
    Principal,
    create_access_token,
    decode_access_token,
    ensure_can_act_for,
)
from app.core.database import get_db
from app.main import app
from app.models.user import UserRole
from tests.conftest import auth_headers, make_user


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


class TestTokens:
    def test_round_trip_keeps_id_and_role(self):
        principal = decode_access_token(create_access_token(7, UserRole.ADMIN.value))
        assert principal == Principal(id=7, role="admin")
        assert principal.is_admin

    def test_expired_token_rejected(self, client):
        token = create_access_token(1, expires_in=timedelta(seconds=-1))
        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    def test_garbage_token_rejected(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_wrong_scheme_rejected(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authorization header format"


class TestEnsureCanActFor:
    def test_customer_acts_for_self(self):
        ensure_can_act_for(Principal(id=1, role="customer"), 1)

    def test_customer_cannot_act_for_others(self):
        with pytest.raises(HTTPException) as exc:
            ensure_can_act_for(Principal(id=1, role="customer"), 2)
        assert exc.value.status_code == 403

    @pytest.mark.parametrize("role", ["salon_owner", "admin"])
    def test_staff_act_for_anyone(self, role):
        ensure_can_act_for(Principal(id=1, role=role), 2)


class TestMe:
    def test_me_returns_current_user(self, client, db_session):
        user = make_user(db_session, name="Asha")
        response = client.get("/api/users/me", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Asha"
        assert response.json()["data"]["role"] == "customer"

    def test_me_for_deleted_user(self, client):
        token = create_access_token(404)
        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404
