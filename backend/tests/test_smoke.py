"""Minimal smoke tests: the app boots and the main flows respond."""

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

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


def test_app_starts():
    """The FastAPI app object can be imported and is a FastAPI instance."""
    assert isinstance(app, FastAPI)


def test_root_endpoint(client: TestClient):
    """GET / returns 200 with app info."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "app" in data
    assert "version" in data


def test_health_endpoint(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_route_uses_error_envelope(client: TestClient):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_membership_to_redemption_flow(client: TestClient, db_session):
    """City, salon, plan, membership, coupon, purchase and redemption end to end."""
    admin = auth_headers(make_user(db_session, role=UserRole.ADMIN))
    customer = make_user(db_session, name="Asha")
    headers = auth_headers(customer)

    city = client.post("/api/admin/city/", json={"name": "Pune"}, headers=admin).json()["data"]
    salon = client.post(
        "/api/admin/salons/",
        json={
            "city_id": city["id"],
            "name": "Glow Studio",
            "phone": "9999999999",
            "address": "1 Main Road",
        },
        headers=admin,
    ).json()["data"]
    plan = client.post(
        f"/api/salon-memberships/{salon['id']}",
        json={"name": "Gold", "price": "999", "duration_days": 30},
        headers=admin,
    ).json()["data"]
    membership = client.post(
        f"/api/salon-memberships/{salon['id']}/purchase",
        json={"customer_id": customer.id, "plan_id": plan["id"]},
        headers=headers,
    )
    assert membership.status_code == 201

    coupon = client.post(
        f"/api/admin/coupons/{salon['id']}",
        json={
            "code": "WELCOME10",
            "discount": "10",
            "max_usage": 100,
            "valid_from": "2020-01-01T00:00:00Z",
            "valid_to": "2099-01-01T00:00:00Z",
        },
        headers=admin,
    ).json()["data"]
    bought = client.post(
        f"/api/admin/coupons/{salon['id']}/{coupon['id']}/buy",
        json={"customer_id": customer.id},
        headers=headers,
    )
    assert bought.status_code == 201

    redeemed = client.post(
        f"/api/admin/coupons/{salon['id']}/redeem",
        json={"customer_id": customer.id, "coupon_code": "WELCOME10"},
        headers=headers,
    )
    assert redeemed.status_code == 200
    assert redeemed.json()["message"] == "Coupon redeemed successfully"

    review = client.post(
        "/api/reviews/",
        json={"salon_id": salon["id"], "rating": 5},
        headers=headers,
    )
    assert review.json()["data"]["is_verified_visit"] is True
