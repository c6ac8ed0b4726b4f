"""API tests for coupon definition, purchase and redemption endpoints."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.main import app
from app.models.coupon import Coupon
from app.models.customer_coupon import CustomerCoupon
from app.models.user import UserRole
from tests.conftest import auth_headers, make_coupon, make_membership, make_salon, make_user


@pytest.fixture
def client():
    """Create test client."""
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
def admin(db_session):
    return make_user(db_session, role=UserRole.ADMIN, name="Admin")


@pytest.fixture
def salon(db_session):
    return make_salon(db_session)


@pytest.fixture
def member(db_session, salon):
    customer = make_user(db_session, name="Asha")
    make_membership(db_session, customer, salon)
    return customer


def _window(days: int = 30) -> dict[str, str]:
    now = datetime.now(UTC)
    return {
        "valid_from": (now - timedelta(days=1)).isoformat(),
        "valid_to": (now + timedelta(days=days)).isoformat(),
    }


class TestCreateCouponApi:
    def test_admin_creates_coupon(self, client, admin, salon):
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={"code": "WELCOME10", "discount": "10", "max_usage": 100, **_window()},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["code"] == "WELCOME10"
        assert body["data"]["salon_id"] == salon.id

    def test_duplicate_code_conflicts(self, client, db_session, admin, salon):
        make_coupon(db_session, salon, code="WELCOME10")
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={"code": "WELCOME10", "discount": "10", "max_usage": 1, **_window()},
            headers=auth_headers(admin),
        )
        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "message": "Coupon code 'WELCOME10' already exists for this salon",
            "code": "duplicate_code",
        }

    def test_inverted_window_is_validation_error(self, client, admin, salon):
        now = datetime.now(UTC)
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={
                "code": "X",
                "discount": "5",
                "max_usage": 1,
                "valid_from": now.isoformat(),
                "valid_to": (now - timedelta(days=1)).isoformat(),
            },
            headers=auth_headers(admin),
        )
        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_mixed_naive_and_aware_window_is_read_as_utc(self, client, admin, salon):
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={
                "code": "MIXED",
                "discount": "5",
                "max_usage": 1,
                "valid_from": "2025-01-01T00:00:00",
                "valid_to": "2099-12-31T00:00:00Z",
            },
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["data"]["code"] == "MIXED"

    def test_mixed_window_out_of_order_is_validation_error(self, client, admin, salon):
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={
                "code": "MIXED",
                "discount": "5",
                "max_usage": 1,
                "valid_from": "2025-01-01T06:00:00+05:30",
                "valid_to": "2025-01-01T00:00:00",
            },
            headers=auth_headers(admin),
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation"
        assert response.json()["code"] == "validation"

    def test_customer_cannot_create(self, client, member, salon):
        response = client.post(
            f"/api/admin/coupons/{salon.id}",
            json={"code": "X", "discount": "5", "max_usage": 1, **_window()},
            headers=auth_headers(member),
        )
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_missing_token(self, client, salon):
        response = client.get(f"/api/admin/coupons/{salon.id}")
        assert response.status_code == 401


class TestListCouponsApi:
    def test_admin_lists_salon_and_all(self, client, db_session, admin, salon):
        other = make_salon(db_session, name="Other")
        make_coupon(db_session, salon, code="A")
        make_coupon(db_session, other, code="B")

        by_salon = client.get(f"/api/admin/coupons/{salon.id}", headers=auth_headers(admin))
        everything = client.get("/api/admin/coupons/", headers=auth_headers(admin))

        assert [c["code"] for c in by_salon.json()["data"]] == ["A"]
        assert len(everything.json()["data"]) == 2

    def test_member_coupon_listing(self, client, db_session, salon, member):
        make_coupon(db_session, salon)
        response = client.get(
            f"/api/salon-memberships/{salon.id}/{member.id}/coupons",
            headers=auth_headers(member),
        )
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1

    def test_non_member_coupon_listing_rejected(self, client, db_session, salon):
        outsider = make_user(db_session, name="Outsider")
        response = client.get(
            f"/api/salon-memberships/{salon.id}/{outsider.id}/coupons",
            headers=auth_headers(outsider),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "membership_required"


class TestPurchaseApi:
    def test_buy_coupon(self, client, db_session, salon, member):
        coupon = make_coupon(db_session, salon)
        response = client.post(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/buy",
            json={"customer_id": member.id, "quantity": 2},
            headers=auth_headers(member),
        )
        assert response.status_code == 201
        assert len(response.json()["data"]) == 2

    def test_cannot_buy_for_someone_else(self, client, db_session, salon, member):
        coupon = make_coupon(db_session, salon)
        other = make_user(db_session, name="Other")
        response = client.post(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/buy",
            json={"customer_id": member.id},
            headers=auth_headers(other),
        )
        assert response.status_code == 403

    def test_cart_purchase_is_all_or_nothing(self, client, db_session, salon, member):
        good = make_coupon(db_session, salon, code="GOOD")
        response = client.post(
            f"/api/admin/coupons/{salon.id}/purchase",
            json={
                "customer_id": member.id,
                "items": [
                    {"coupon_id": good.id, "quantity": 2},
                    {"coupon_id": 9999, "quantity": 1},
                ],
            },
            headers=auth_headers(member),
        )
        assert response.status_code == 404
        assert db_session.query(CustomerCoupon).count() == 0

    def test_cart_purchase(self, client, db_session, salon, member):
        a = make_coupon(db_session, salon, code="A")
        b = make_coupon(db_session, salon, code="B")
        response = client.post(
            f"/api/admin/coupons/{salon.id}/purchase",
            json={
                "customer_id": member.id,
                "items": [{"coupon_id": a.id, "quantity": 2}, {"coupon_id": b.id}],
            },
            headers=auth_headers(member),
        )
        assert response.status_code == 201
        lines = response.json()["data"]
        assert [(line["coupon_id"], len(line["purchase_ids"])) for line in lines] == [
            (a.id, 2),
            (b.id, 1),
        ]
        assert lines[0]["status"] == "purchased"

    def test_empty_cart_is_validation_error(self, client, salon, member):
        response = client.post(
            f"/api/admin/coupons/{salon.id}/purchase",
            json={"customer_id": member.id, "items": []},
            headers=auth_headers(member),
        )
        assert response.status_code == 422

    def test_customer_purchased_coupons(self, client, db_session, salon, member):
        coupon = make_coupon(db_session, salon)
        client.post(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/buy",
            json={"customer_id": member.id},
            headers=auth_headers(member),
        )
        response = client.get(
            f"/api/admin/coupons/customer/{member.id}", headers=auth_headers(member)
        )
        assert response.status_code == 200
        [row] = response.json()["data"]
        assert row["purchase_status"] == "active"
        assert row["coupon"]["code"] == coupon.code


class TestRedeemApi:
    def test_redeem_then_redeem_again(self, client, db_session, salon, member):
        coupon = make_coupon(db_session, salon, code="WELCOME10")
        client.post(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/buy",
            json={"customer_id": member.id},
            headers=auth_headers(member),
        )

        first = client.post(
            f"/api/admin/coupons/{salon.id}/redeem",
            json={"customer_id": member.id, "coupon_code": "WELCOME10"},
            headers=auth_headers(member),
        )
        second = client.post(
            f"/api/admin/coupons/{salon.id}/redeem",
            json={"customer_id": member.id, "coupon_code": "WELCOME10"},
            headers=auth_headers(member),
        )

        assert first.status_code == 200
        assert first.json()["data"]["status"] == "redeemed"
        assert second.status_code == 400
        assert second.json()["code"] == "no_active_purchase"

    def test_invalid_code(self, client, salon, member):
        response = client.post(
            f"/api/admin/coupons/{salon.id}/redeem",
            json={"customer_id": member.id, "coupon_code": "NOPE"},
            headers=auth_headers(member),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Invalid coupon for this salon"

    def test_redemption_history(self, client, db_session, admin, salon, member):
        coupon = make_coupon(db_session, salon)
        client.post(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/buy",
            json={"customer_id": member.id},
            headers=auth_headers(member),
        )
        client.post(
            f"/api/admin/coupons/{salon.id}/redeem",
            json={"customer_id": member.id, "coupon_code": coupon.code},
            headers=auth_headers(member),
        )
        response = client.get(
            f"/api/admin/coupons/{salon.id}/{coupon.id}/redemptions",
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1


class TestSweepApi:
    def test_admin_runs_sweep(self, client, db_session, admin, salon):
        now = datetime.now(UTC)
        make_coupon(
            db_session,
            salon,
            code="OLD",
            valid_from=now - timedelta(days=5),
            valid_to=now - timedelta(days=1),
        )
        response = client.post("/api/admin/coupons/sweep", headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["data"]["deleted_coupons"] == 1
        db_session.expire_all()
        assert db_session.query(Coupon).count() == 0

    def test_customer_cannot_sweep(self, client, member):
        response = client.post("/api/admin/coupons/sweep", headers=auth_headers(member))
        assert response.status_code == 403

    def test_admin_enqueues_sweep(self, client, admin):
        job = MagicMock()
        job.job_id = "expire_coupons_task:202610190000"
        with patch(
            "app.routers.coupons.enqueue_coupon_sweep", new_callable=AsyncMock
        ) as mock_enqueue:
            mock_enqueue.return_value = job
            response = client.post("/api/admin/coupons/sweep/enqueue", headers=auth_headers(admin))
        assert response.status_code == 202
        assert response.json()["data"] == {"job_id": job.job_id, "queued": True}

    def test_duplicate_enqueue_reports_not_queued(self, client, admin):
        with patch(
            "app.routers.coupons.enqueue_coupon_sweep", new_callable=AsyncMock
        ) as mock_enqueue:
            mock_enqueue.return_value = None
            response = client.post("/api/admin/coupons/sweep/enqueue", headers=auth_headers(admin))
        assert response.status_code == 202
        assert response.json()["data"]["queued"] is False
        assert response.json()["message"] == "Sweep already queued"

    def test_customer_cannot_enqueue_sweep(self, client, member):
        response = client.post("/api/admin/coupons/sweep/enqueue", headers=auth_headers(member))
        assert response.status_code == 403
