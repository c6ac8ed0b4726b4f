"""Tests for reviews: posting, rating recompute, likes, reports, responses and stats."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.core.auth import Principal
from app.core.database import get_db
from app.core.errors import (
    ConflictError,
    InputValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from app.core.sorting import Page
from app.main import app
from app.models.coupon_redemption import CouponRedemption
from app.models.review import Review, ReviewStatus
from app.models.review_image import ReviewImage
from app.models.review_report import ReportReason, ReportStatus
from app.models.salon import Salon
from app.models.user import UserRole
from app.schemas.review import ReportCreate, ReviewCreate, ReviewUpdate
from app.services.review_service import ReviewService
from tests.conftest import auth_headers, make_coupon, make_salon, make_user


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
def service(db_session):
    return ReviewService(db_session)


@pytest.fixture
def salon(db_session):
    return make_salon(db_session)


@pytest.fixture
def author(db_session):
    return make_user(db_session, name="Asha")


@pytest.fixture
def owner(db_session):
    return make_user(db_session, role=UserRole.SALON_OWNER, name="Owner")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, role=UserRole.ADMIN, name="Admin")


def _principal(user) -> Principal:
    return Principal(id=user.id, role=user.role)


def _salon_rating(db_session, salon_id):
    db_session.expire_all()
    salon = db_session.query(Salon).filter(Salon.id == salon_id).one()
    return Decimal(salon.rating), salon.total_reviews


class TestCreateReview:
    def test_create_updates_salon_rating(self, db_session, service, salon, author):
        other = make_user(db_session, name="Ravi")
        service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=5))
        service.create_review(other.id, ReviewCreate(salon_id=salon.id, rating=4))

        assert _salon_rating(db_session, salon.id) == (Decimal("4.5"), 2)

    def test_review_is_approved_with_names_and_images(self, service, salon, author):
        review = service.create_review(
            author.id,
            ReviewCreate(
                salon_id=salon.id,
                rating=4,
                title="Nice",
                images=["http://cdn/1.jpg", "http://cdn/2.jpg"],
            ),
        )
        assert review.status == ReviewStatus.APPROVED.value
        assert review.user_name == "Asha"
        assert review.salon_name == salon.name
        assert [i.image_url for i in review.images] == ["http://cdn/1.jpg", "http://cdn/2.jpg"]
        assert [i.display_order for i in review.images] == [0, 1]

    def test_one_review_per_salon(self, service, salon, author):
        service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=5))
        with pytest.raises(ConflictError) as exc:
            service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=1))
        assert exc.value.code == "review_exists"

    def test_unknown_salon(self, service, author):
        with pytest.raises(NotFoundError):
            service.create_review(author.id, ReviewCreate(salon_id=999, rating=5))

    def test_redeemed_coupon_marks_verified_visit(self, db_session, service, salon, author):
        coupon = make_coupon(db_session, salon)
        db_session.add(
            CouponRedemption(
                coupon_id=coupon.id,
                customer_id=author.id,
                status="redeemed",
                redeemed_at=datetime.now(UTC),
            )
        )
        db_session.commit()

        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=5))
        assert review.is_verified_visit is True

    def test_failure_after_insert_rolls_back(self, db_session, service, salon, author):
        with patch.object(
            service, "_recompute_salon_rating", side_effect=RuntimeError("recompute failed")
        ):
            with pytest.raises(RuntimeError, match="recompute failed"):
                service.create_review(
                    author.id,
                    ReviewCreate(salon_id=salon.id, rating=5, images=["http://cdn/1.jpg"]),
                )

        assert db_session.query(Review).count() == 0
        assert db_session.query(ReviewImage).count() == 0
        service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        assert _salon_rating(db_session, salon.id) == (Decimal("4.0"), 1)

    def test_rating_out_of_range_rejected_by_schema(self, salon):
        with pytest.raises(ValueError):
            ReviewCreate(salon_id=salon.id, rating=6)


class TestUpdateAndDelete:
    def test_author_updates_rating_and_images(self, db_session, service, salon, author):
        review = service.create_review(
            author.id, ReviewCreate(salon_id=salon.id, rating=2, images=["http://cdn/old.jpg"])
        )
        updated = service.update_review(
            author.id, review.id, ReviewUpdate(rating=5, images=["http://cdn/new.jpg"])
        )
        assert updated.rating == 5
        assert [i.image_url for i in updated.images] == ["http://cdn/new.jpg"]
        assert _salon_rating(db_session, salon.id) == (Decimal("5.0"), 1)

    def test_other_user_cannot_update(self, db_session, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=2))
        intruder = make_user(db_session, name="Intruder")
        with pytest.raises(PermissionDeniedError):
            service.update_review(intruder.id, review.id, ReviewUpdate(rating=5))

    def test_delete_recomputes_rating(self, db_session, service, salon, author):
        review = service.create_review(
            author.id, ReviewCreate(salon_id=salon.id, rating=3, images=["http://cdn/a.jpg"])
        )
        service.delete_review(_principal(author), review.id)

        assert _salon_rating(db_session, salon.id) == (Decimal("0.0"), 0)
        assert db_session.query(ReviewImage).count() == 0

    def test_admin_may_delete_any_review(self, service, salon, author, admin):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=3))
        service.delete_review(_principal(admin), review.id)
        with pytest.raises(NotFoundError):
            service.get_review(review.id)

    def test_stranger_cannot_delete(self, db_session, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=3))
        stranger = make_user(db_session, name="Stranger")
        with pytest.raises(PermissionDeniedError):
            service.delete_review(_principal(stranger), review.id)


class TestModeration:
    def test_hidden_reviews_leave_the_rating(self, db_session, service, salon, author):
        other = make_user(db_session, name="Ravi")
        low = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=1))
        service.create_review(other.id, ReviewCreate(salon_id=salon.id, rating=5))

        service.moderate_review(low.id, ReviewStatus.HIDDEN)

        assert _salon_rating(db_session, salon.id) == (Decimal("5.0"), 1)
        page = service.list_salon_reviews(salon.id, Page())
        assert [r.rating for r in page.reviews] == [5]

    def test_report_flow(self, db_session, service, salon, author, admin):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=1))
        reporter = make_user(db_session, name="Reporter")

        report = service.report_review(
            reporter.id, review.id, ReportCreate(reason=ReportReason.SPAM)
        )
        reports, pagination = service.list_reports(Page())
        assert [r.id for r in reports] == [report.id]
        assert pagination.total == 1

        resolved = service.handle_report(report.id, ReportStatus.REVIEWED, admin.id)
        assert resolved.status == ReportStatus.REVIEWED.value
        assert resolved.reviewed_by == admin.id
        assert service.list_reports(Page())[0] == []

    def test_duplicate_report(self, db_session, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=1))
        reporter = make_user(db_session, name="Reporter")
        service.report_review(reporter.id, review.id, ReportCreate(reason=ReportReason.FAKE))
        with pytest.raises(ConflictError) as exc:
            service.report_review(reporter.id, review.id, ReportCreate(reason=ReportReason.FAKE))
        assert exc.value.code == "report_exists"

    def test_cannot_report_own_review(self, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=1))
        with pytest.raises(PermissionDeniedError):
            service.report_review(author.id, review.id, ReportCreate(reason=ReportReason.OTHER))

    def test_report_cannot_go_back_to_pending(self, service, admin):
        with pytest.raises(InputValidationError):
            service.handle_report(1, ReportStatus.PENDING, admin.id)


class TestLikes:
    def test_toggle_like(self, db_session, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        fan = make_user(db_session, name="Fan")

        liked = service.toggle_like(fan.id, review.id)
        assert (liked.liked, liked.likes_count) == (True, 1)
        assert service.get_review(review.id, viewer_id=fan.id).is_liked_by_user is True

        unliked = service.toggle_like(fan.id, review.id)
        assert (unliked.liked, unliked.likes_count) == (False, 0)


class TestOwnerResponses:
    def test_owner_responds_once(self, service, salon, author, owner):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))

        response = service.add_owner_response(_principal(owner), review.id, "Thanks!")
        assert response.responder_name == "Owner"
        assert service.get_review(review.id).owner_response.response == "Thanks!"

        with pytest.raises(ConflictError):
            service.add_owner_response(_principal(owner), review.id, "Again")

    def test_customers_cannot_respond(self, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        with pytest.raises(PermissionDeniedError):
            service.add_owner_response(_principal(author), review.id, "Me too")

    def test_only_responder_edits(self, db_session, service, salon, author, owner):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        service.add_owner_response(_principal(owner), review.id, "Thanks!")
        other_owner = make_user(db_session, role=UserRole.SALON_OWNER, name="Other owner")

        with pytest.raises(PermissionDeniedError):
            service.update_owner_response(_principal(other_owner), review.id, "Hijack")
        assert service.update_owner_response(_principal(owner), review.id, "Cheers").response == "Cheers"

    def test_admin_deletes_response(self, service, salon, author, owner, admin):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        service.add_owner_response(_principal(owner), review.id, "Thanks!")
        service.delete_owner_response(_principal(admin), review.id)
        assert service.get_review(review.id).owner_response is None


class TestStats:
    def test_empty_salon(self, service, salon):
        stats = service.get_salon_stats(salon.id)
        assert stats.total_reviews == 0
        assert stats.average_rating == "0.0"
        assert stats.rating_distribution.five_star.percentage == "0"

    def test_distribution(self, db_session, service, salon):
        for rating in (5, 5, 4, 1):
            user = make_user(db_session, name=f"u{rating}")
            service.create_review(
                user.id,
                ReviewCreate(
                    salon_id=salon.id,
                    rating=rating,
                    images=["http://cdn/x.jpg"] if rating == 4 else [],
                ),
            )

        stats = service.get_salon_stats(salon.id)

        assert stats.total_reviews == 4
        assert stats.average_rating == "3.8"
        assert stats.rating_distribution.five_star.count == 2
        assert stats.rating_distribution.five_star.percentage == "50.0"
        assert stats.rating_distribution.one_star.percentage == "25.0"
        assert stats.reviews_with_images == 1
        assert stats.recent_activity.last_30_days_reviews == 4

    def test_unknown_salon(self, service):
        with pytest.raises(NotFoundError):
            service.get_salon_stats(999)


class TestReviewsApi:
    def test_post_and_list(self, client, salon, author):
        created = client.post(
            "/api/reviews/",
            json={"salon_id": salon.id, "rating": 5, "comment": "Great"},
            headers=auth_headers(author),
        )
        assert created.status_code == 201

        listed = client.get(f"/api/reviews/salon/{salon.id}")
        body = listed.json()["data"]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "total_pages": 1}
        assert body["reviews"][0]["comment"] == "Great"

    def test_posting_requires_login(self, client, salon):
        response = client.post("/api/reviews/", json={"salon_id": salon.id, "rating": 5})
        assert response.status_code == 401

    def test_like_endpoint(self, client, db_session, service, salon, author):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        fan = make_user(db_session, name="Fan")
        response = client.post(f"/api/reviews/{review.id}/like", headers=auth_headers(fan))
        assert response.json()["message"] == "Review liked"
        assert response.json()["data"]["likes_count"] == 1

    def test_my_reviews(self, client, service, salon, author):
        service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        response = client.get("/api/reviews/user/me", headers=auth_headers(author))
        assert response.json()["data"]["pagination"]["total"] == 1

    def test_stats_endpoint(self, client, service, salon, author):
        service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))
        response = client.get(f"/api/reviews/salon/{salon.id}/stats")
        assert response.status_code == 200
        assert response.json()["data"]["average_rating"] == "4.0"

    def test_admin_moderation_endpoints(self, client, service, salon, author, admin):
        review = service.create_review(author.id, ReviewCreate(salon_id=salon.id, rating=4))

        moderated = client.patch(
            f"/api/admin/reviews/{review.id}/moderate",
            json={"status": "hidden"},
            headers=auth_headers(admin),
        )
        listed = client.get(
            "/api/admin/reviews/", params={"status": "hidden"}, headers=auth_headers(admin)
        )

        assert moderated.json()["data"] == {"review_id": review.id, "new_status": "hidden"}
        assert listed.json()["data"]["pagination"]["total"] == 1

    def test_admin_endpoints_reject_customers(self, client, author):
        response = client.get("/api/admin/reviews/reports", headers=auth_headers(author))
        assert response.status_code == 403
