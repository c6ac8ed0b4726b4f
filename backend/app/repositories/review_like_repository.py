"""ReviewLike repository for data access."""

from sqlalchemy.orm import Session

from app.models.review_like import ReviewLike


class ReviewLikeRepository:
    """Repository for ReviewLike model."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, review_id: int, user_id: int) -> ReviewLike | None:
        return (
            self.db.query(ReviewLike)
            .filter(ReviewLike.review_id == review_id, ReviewLike.user_id == user_id)
            .first()
        )

    def add(self, review_id: int, user_id: int) -> ReviewLike:
        like = ReviewLike(review_id=review_id, user_id=user_id)
        self.db.add(like)
        self.db.flush()
        return like

    def delete(self, like: ReviewLike) -> None:
        self.db.delete(like)
        self.db.flush()

    def liked_review_ids(self, user_id: int, review_ids: list[int]) -> set[int]:
        if not review_ids:
            return set()
        rows = (
            self.db.query(ReviewLike.review_id)
            .filter(ReviewLike.user_id == user_id, ReviewLike.review_id.in_(review_ids))
            .all()
        )
        return {row.review_id for row in rows}
