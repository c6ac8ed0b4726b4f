"""Salon reviews, likes, reports, owner responses and moderation.

Any change that can move a salon's approved-review set recomputes
``Salon.rating`` and ``Salon.total_reviews`` in the same transaction.
"""

import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.errors import (
    ConflictError,
    InputValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from app.core.sorting import Page
from app.models.review import Review, ReviewStatus
from app.models.review_report import ReportStatus, ReviewReport
from app.models.review_response import ReviewResponse as OwnerReply
from app.models.shared import utc_now
from app.models.user import UserRole
from app.repositories.coupon_redemption_repository import CouponRedemptionRepository
from app.repositories.review_image_repository import ReviewImageRepository
from app.repositories.review_like_repository import ReviewLikeRepository
from app.repositories.review_report_repository import ReviewReportRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.review_response_repository import ReviewResponseRepository
from app.repositories.salon_repository import SalonRepository
from app.repositories.user_repository import UserRepository
from app.schemas.common import Pagination
from app.schemas.review import (
    LikeToggleResponse,
    OwnerResponseResponse,
    RatingBucket,
    RatingDistribution,
    RecentActivity,
    ReportCreate,
    ReviewCreate,
    ReviewImageResponse,
    ReviewPage,
    ReviewResponse,
    ReviewUpdate,
    SalonReviewStats,
)

logger = logging.getLogger(__name__)

RESPONDER_ROLES = {UserRole.SALON_OWNER.value, UserRole.ADMIN.value}


def _one_decimal(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _percentage(count: int, total: int) -> str:
    if not total:
        return "0"
    return str(_one_decimal(count / total * 100))


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.review_repo = ReviewRepository(db)
        self.image_repo = ReviewImageRepository(db)
        self.like_repo = ReviewLikeRepository(db)
        self.report_repo = ReviewReportRepository(db)
        self.response_repo = ReviewResponseRepository(db)
        self.salon_repo = SalonRepository(db)
        self.user_repo = UserRepository(db)
        self.redemption_repo = CouponRedemptionRepository(db)

    # Reviews

    def create_review(self, user_id: int, data: ReviewCreate) -> ReviewResponse:
        """Post a review; a redeemed coupon at the salon marks it as a verified visit."""
        if self.review_repo.get_by_salon_and_user(data.salon_id, user_id):
            raise ConflictError("You have already reviewed this salon", code="review_exists")
        if not self.salon_repo.exists(data.salon_id):
            raise NotFoundError("Salon not found", code="salon_not_found")

        verified = self.redemption_repo.has_redeemed_at_salon(user_id, data.salon_id)
        try:
            review = self.review_repo.create(
                salon_id=data.salon_id,
                user_id=user_id,
                rating=data.rating,
                title=data.title,
                comment=data.comment,
                visit_date=data.visit_date,
                is_verified_visit=verified,
                status=ReviewStatus.APPROVED.value,
                likes_count=0,
            )
            if data.images:
                self.image_repo.replace(review.id, data.images)  # type: ignore[arg-type]
            self._recompute_salon_rating(data.salon_id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You have already reviewed this salon", code="review_exists") from None
        except Exception:
            self.db.rollback()
            raise

        logger.info("User %s reviewed salon %s (%d stars)", user_id, data.salon_id, data.rating)
        return self.get_review(review.id)  # type: ignore[arg-type]

    def update_review(self, user_id: int, review_id: int, data: ReviewUpdate) -> ReviewResponse:
        review = self._get(review_id)
        if review.user_id != user_id:
            raise PermissionDeniedError("You do not have permission to edit this review")

        fields = data.model_dump(exclude_unset=True, exclude={"images"})
        fields = {k: v for k, v in fields.items() if not (k == "rating" and v is None)}
        try:
            self.review_repo.apply_changes(review, fields)
            if data.images is not None:
                self.image_repo.replace(review_id, data.images)
            self._recompute_salon_rating(review.salon_id)  # type: ignore[arg-type]
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self.get_review(review_id)

    def delete_review(self, principal: Principal, review_id: int) -> None:
        """Authors delete their own reviews; admins may delete any."""
        review = self._get(review_id)
        if not principal.is_admin and review.user_id != principal.id:
            raise PermissionDeniedError("You do not have permission to delete this review")

        salon_id = int(review.salon_id)  # type: ignore[arg-type]
        try:
            self.review_repo.delete(review)
            self._recompute_salon_rating(salon_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Review %s deleted by user %s", review_id, principal.id)

    def get_review(self, review_id: int, viewer_id: int | None = None) -> ReviewResponse:
        return self._present([self._get(review_id)], viewer_id)[0]

    def list_salon_reviews(
        self,
        salon_id: int,
        page: Page,
        status: ReviewStatus | None = ReviewStatus.APPROVED,
        rating: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        viewer_id: int | None = None,
    ) -> ReviewPage:
        reviews, total = self.review_repo.list_by_salon(
            salon_id, page, status=status, rating=rating, sort_by=sort_by, sort_order=sort_order
        )
        return ReviewPage(reviews=self._present(reviews, viewer_id), pagination=_pagination(page, total))

    def list_user_reviews(self, user_id: int, page: Page) -> ReviewPage:
        reviews, total = self.review_repo.list_by_user(user_id, page)
        return ReviewPage(reviews=self._present(reviews, user_id), pagination=_pagination(page, total))

    def list_all_reviews(
        self,
        page: Page,
        status: ReviewStatus | None = None,
        salon_id: int | None = None,
        user_id: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> ReviewPage:
        reviews, total = self.review_repo.list_all(
            page,
            status=status,
            salon_id=salon_id,
            user_id=user_id,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return ReviewPage(reviews=self._present(reviews), pagination=_pagination(page, total))

    # Likes and reports

    def toggle_like(self, user_id: int, review_id: int) -> LikeToggleResponse:
        self._get(review_id)
        try:
            like = self.like_repo.get(review_id, user_id)
            if like:
                self.like_repo.delete(like)
                count = self.review_repo.adjust_likes(review_id, -1)
            else:
                self.like_repo.add(review_id, user_id)
                count = self.review_repo.adjust_likes(review_id, 1)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Like already recorded", code="like_exists") from None
        return LikeToggleResponse(liked=like is None, likes_count=count)

    def report_review(self, user_id: int, review_id: int, data: ReportCreate) -> ReviewReport:
        review = self._get(review_id)
        if review.user_id == user_id:
            raise PermissionDeniedError("You cannot report your own review")
        if self.report_repo.exists(review_id, user_id):
            raise ConflictError("You have already reported this review", code="report_exists")
        try:
            report = self.report_repo.create(review_id, user_id, data.reason, data.description)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You have already reported this review", code="report_exists") from None
        logger.info("User %s reported review %s (%s)", user_id, review_id, data.reason.value)
        return report

    # Moderation

    def moderate_review(self, review_id: int, status: ReviewStatus) -> Review:
        review = self._get(review_id)
        try:
            self.review_repo.apply_changes(review, {"status": status.value})
            self._recompute_salon_rating(review.salon_id)  # type: ignore[arg-type]
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Review %s moderated to %s", review_id, status.value)
        return review

    def list_reports(
        self, page: Page, status: ReportStatus = ReportStatus.PENDING
    ) -> tuple[list[ReviewReport], Pagination]:
        reports, total = self.report_repo.list_by_status(status, page)
        return reports, _pagination(page, total)

    def handle_report(
        self, report_id: int, status: ReportStatus, reviewer_id: int
    ) -> ReviewReport:
        if status == ReportStatus.PENDING:
            raise InputValidationError("A report can only be marked reviewed or dismissed")
        report = self.report_repo.get_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found", code="report_not_found")
        return self.report_repo.resolve(report, status, reviewer_id, utc_now())

    # Owner responses

    def add_owner_response(
        self, principal: Principal, review_id: int, text: str
    ) -> OwnerResponseResponse:
        if principal.role not in RESPONDER_ROLES:
            raise PermissionDeniedError("Only salon owners can respond to reviews")
        self._get(review_id)
        if self.response_repo.get_by_review(review_id):
            raise ConflictError("A response already exists for this review", code="response_exists")
        try:
            response = self.response_repo.create(review_id, principal.id, text)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                "A response already exists for this review", code="response_exists"
            ) from None
        return self._present_response(response)

    def update_owner_response(
        self, principal: Principal, review_id: int, text: str
    ) -> OwnerResponseResponse:
        response = self._get_response(review_id)
        if response.responder_id != principal.id:
            raise PermissionDeniedError("You do not have permission to edit this response")
        return self._present_response(self.response_repo.update(response, text))

    def delete_owner_response(self, principal: Principal, review_id: int) -> None:
        response = self._get_response(review_id)
        if not principal.is_admin and response.responder_id != principal.id:
            raise PermissionDeniedError("You do not have permission to delete this response")
        self.response_repo.delete(response)

    # Stats

    def get_salon_stats(self, salon_id: int, now: datetime | None = None) -> SalonReviewStats:
        if not self.salon_repo.exists(salon_id):
            raise NotFoundError("Salon not found", code="salon_not_found")

        now = now or utc_now()
        total, average = self.review_repo.approved_summary(salon_id)
        breakdown = self.review_repo.approved_breakdown(salon_id)
        recent_total, recent_average = self.review_repo.approved_summary(
            salon_id, since=now - timedelta(days=30)
        )

        def bucket(key: str) -> RatingBucket:
            return RatingBucket(count=breakdown[key], percentage=_percentage(breakdown[key], total))

        return SalonReviewStats(
            salon_id=salon_id,
            total_reviews=total,
            average_rating=str(_one_decimal(average)),
            verified_reviews=breakdown["verified"],
            reviews_with_images=self.review_repo.count_approved_with_images(salon_id),
            rating_distribution=RatingDistribution(
                five_star=bucket("five_star"),
                four_star=bucket("four_star"),
                three_star=bucket("three_star"),
                two_star=bucket("two_star"),
                one_star=bucket("one_star"),
            ),
            recent_activity=RecentActivity(
                last_30_days_reviews=recent_total,
                last_30_days_average=str(_one_decimal(recent_average)),
            ),
        )

    # Helpers

    def _recompute_salon_rating(self, salon_id: int) -> None:
        self.db.flush()
        total, average = self.review_repo.approved_summary(salon_id)
        self.salon_repo.set_rating(salon_id, _one_decimal(average), total)

    def _get(self, review_id: int) -> Review:
        review = self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review not found", code="review_not_found")
        return review

    def _get_response(self, review_id: int) -> OwnerReply:
        response = self.response_repo.get_by_review(review_id)
        if not response:
            raise NotFoundError("Response not found", code="response_not_found")
        return response

    def _present_response(self, response: OwnerReply) -> OwnerResponseResponse:
        names = self.user_repo.get_names({int(response.responder_id)})  # type: ignore[arg-type]
        result = OwnerResponseResponse.model_validate(response)
        result.responder_name = names.get(result.responder_id)
        return result

    def _present(self, reviews: list[Review], viewer_id: int | None = None) -> list[ReviewResponse]:
        """Attach author and salon names, images, owner response and the viewer's like."""
        ids = [int(r.id) for r in reviews]  # type: ignore[arg-type]
        images = self.image_repo.get_by_reviews(ids)
        responses = self.response_repo.get_by_reviews(ids)
        liked = self.like_repo.liked_review_ids(viewer_id, ids) if viewer_id else set()
        user_names = self.user_repo.get_names(
            {int(r.user_id) for r in reviews}  # type: ignore[arg-type]
            | {int(resp.responder_id) for resp in responses.values()}  # type: ignore[arg-type]
        )
        salon_names = self.salon_repo.get_names({int(r.salon_id) for r in reviews})  # type: ignore[arg-type]

        result = []
        for review in reviews:
            item = ReviewResponse.model_validate(review)
            item.user_name = user_names.get(item.user_id)
            item.salon_name = salon_names.get(item.salon_id)
            item.images = [ReviewImageResponse.model_validate(i) for i in images.get(item.id, [])]
            owner_response = responses.get(item.id)
            if owner_response is not None:
                item.owner_response = OwnerResponseResponse.model_validate(owner_response)
                item.owner_response.responder_name = user_names.get(
                    item.owner_response.responder_id
                )
            item.is_liked_by_user = item.id in liked
            result.append(item)
        return result


def _pagination(page: Page, total: int) -> Pagination:
    return Pagination(
        page=page.page, limit=page.limit, total=total, total_pages=page.total_pages(total)
    )
