"""Review repository for data access."""

from datetime import datetime
from typing import Any

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.sorting import Page, apply_order_by
from app.models.review import Review, ReviewStatus
from app.models.review_image import ReviewImage

SALON_SORT_FIELDS = ("created_at", "rating", "likes_count")
ADMIN_SORT_FIELDS = ("created_at", "rating", "likes_count", "status")


class ReviewRepository:
    """Repository for Review model.

    Writes only flush; the review service commits together with the salon
    rating recompute.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, review_id: int) -> Review | None:
        return self.db.query(Review).filter(Review.id == review_id).first()

    def get_by_salon_and_user(self, salon_id: int, user_id: int) -> Review | None:
        return (
            self.db.query(Review)
            .filter(Review.salon_id == salon_id, Review.user_id == user_id)
            .first()
        )

    def list_by_salon(
        self,
        salon_id: int,
        page: Page,
        status: ReviewStatus | None = ReviewStatus.APPROVED,
        rating: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[Review], int]:
        query = self.db.query(Review).filter(Review.salon_id == salon_id)
        if status:
            query = query.filter(Review.status == status.value)
        if rating:
            query = query.filter(Review.rating == rating)
        total = query.count()
        query = apply_order_by(query, Review, sort_by, sort_order, allowed=SALON_SORT_FIELDS)
        return query.offset(page.offset).limit(page.limit).all(), total

    def list_by_user(self, user_id: int, page: Page) -> tuple[list[Review], int]:
        query = self.db.query(Review).filter(Review.user_id == user_id)
        total = query.count()
        rows = (
            query.order_by(Review.created_at.desc(), Review.id.desc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return rows, total

    def list_all(
        self,
        page: Page,
        status: ReviewStatus | None = None,
        salon_id: int | None = None,
        user_id: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[Review], int]:
        query = self.db.query(Review)
        if status:
            query = query.filter(Review.status == status.value)
        if salon_id:
            query = query.filter(Review.salon_id == salon_id)
        if user_id:
            query = query.filter(Review.user_id == user_id)
        total = query.count()
        query = apply_order_by(query, Review, sort_by, sort_order, allowed=ADMIN_SORT_FIELDS)
        return query.offset(page.offset).limit(page.limit).all(), total

    def create(self, **fields: Any) -> Review:
        review = Review(**fields)
        self.db.add(review)
        self.db.flush()
        return review

    def apply_changes(self, review: Review, fields: dict[str, Any]) -> Review:
        for key, value in fields.items():
            setattr(review, key, value)
        self.db.flush()
        return review

    def delete(self, review: Review) -> None:
        self.db.delete(review)
        self.db.flush()

    def adjust_likes(self, review_id: int, delta: int) -> int:
        """Shift likes_count by ``delta`` in SQL and return the new value."""
        self.db.query(Review).filter(Review.id == review_id).update(
            {Review.likes_count: Review.likes_count + delta},
            synchronize_session=False,
        )
        return int(
            self.db.query(Review.likes_count).filter(Review.id == review_id).scalar() or 0
        )

    def approved_summary(self, salon_id: int, since: datetime | None = None) -> tuple[int, float]:
        """Count and average rating of a salon's approved reviews."""
        query = self.db.query(func.count(Review.id), func.coalesce(func.avg(Review.rating), 0)).filter(
            Review.salon_id == salon_id,
            Review.status == ReviewStatus.APPROVED.value,
        )
        if since is not None:
            query = query.filter(Review.created_at >= since)
        count, average = query.one()
        return int(count or 0), float(average or 0)

    def approved_breakdown(self, salon_id: int) -> dict[str, int]:
        """Per-star counts plus verified-visit count for approved reviews."""

        def stars(value: int) -> Any:
            return func.coalesce(func.sum(case((Review.rating == value, 1), else_=0)), 0)

        row = (
            self.db.query(
                stars(5),
                stars(4),
                stars(3),
                stars(2),
                stars(1),
                func.coalesce(func.sum(case((Review.is_verified_visit.is_(True), 1), else_=0)), 0),
            )
            .filter(
                Review.salon_id == salon_id,
                Review.status == ReviewStatus.APPROVED.value,
            )
            .one()
        )
        keys = ("five_star", "four_star", "three_star", "two_star", "one_star", "verified")
        return {key: int(value or 0) for key, value in zip(keys, row, strict=True)}

    def count_approved_with_images(self, salon_id: int) -> int:
        return int(
            self.db.query(func.count(func.distinct(Review.id)))
            .join(ReviewImage, ReviewImage.review_id == Review.id)
            .filter(
                Review.salon_id == salon_id,
                Review.status == ReviewStatus.APPROVED.value,
            )
            .scalar()
            or 0
        )
