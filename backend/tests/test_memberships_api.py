"""API tests for membership plans and customer memberships."""

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.main import app
from app.models.salon_membership_plan import MembershipPlanStatus
from app.models.user import UserRole
from tests.conftest import auth_headers, make_membership, make_plan, make_salon, make_user


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


@pytest.fixture
def salon(db_session):
    return make_salon(db_session)


@pytest.fixture
def customer(db_session):
    return make_user(db_session, name="Asha")


class TestPlansApi:
    def test_admin_creates_plan(self, client, db_session, salon):
        admin = make_user(db_session, role=UserRole.ADMIN)
        response = client.post(
            f"/api/salon-memberships/{salon.id}",
            json={"name": "Gold", "price": "999.00", "duration_days": 30},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["data"]["status"] == "active"

    def test_plan_listing_is_public(self, client, db_session, salon):
        make_plan(db_session, salon)
        make_plan(db_session, salon, status=MembershipPlanStatus.INACTIVE)
        response = client.get(f"/api/salon-memberships/{salon.id}")
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1

    def test_customer_cannot_create_plan(self, client, salon, customer):
        response = client.post(
            f"/api/salon-memberships/{salon.id}",
            json={"name": "Gold", "price": "999.00", "duration_days": 30},
            headers=auth_headers(customer),
        )
        assert response.status_code == 403


class TestPurchaseApi:
    def test_purchase_then_conflict(self, client, db_session, salon, customer):
        plan = make_plan(db_session, salon)
        payload = {"customer_id": customer.id, "plan_id": plan.id}

        first = client.post(
            f"/api/salon-memberships/{salon.id}/purchase",
            json=payload,
            headers=auth_headers(customer),
        )
        second = client.post(
            f"/api/salon-memberships/{salon.id}/purchase",
            json=payload,
            headers=auth_headers(customer),
        )

        assert first.status_code == 201
        assert first.json()["data"]["plan_id"] == plan.id
        assert second.status_code == 409
        assert second.json()["code"] == "membership_exists"

    def test_salon_owner_may_purchase_for_customer(self, client, db_session, salon, customer):
        owner = make_user(db_session, role=UserRole.SALON_OWNER, name="Owner")
        plan = make_plan(db_session, salon)
        response = client.post(
            f"/api/salon-memberships/{salon.id}/purchase",
            json={"customer_id": customer.id, "plan_id": plan.id},
            headers=auth_headers(owner),
        )
        assert response.status_code == 201


class TestCustomerMembershipsApi:
    def test_lists_all_and_active(self, client, db_session, salon, customer):
        make_membership(db_session, customer, salon)

        everything = client.get(
            f"/api/customer-memberships/{customer.id}", headers=auth_headers(customer)
        )
        active = client.get(
            f"/api/customer-memberships/{customer.id}/active", headers=auth_headers(customer)
        )

        assert everything.status_code == 200
        assert everything.json()["data"][0]["salon_name"] == salon.name
        assert len(active.json()["data"]) == 1

    def test_other_customer_forbidden(self, client, db_session, customer):
        other = make_user(db_session, name="Other")
        response = client.get(
            f"/api/customer-memberships/{customer.id}", headers=auth_headers(other)
        )
        assert response.status_code == 403
