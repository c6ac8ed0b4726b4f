"""ReviewResponse repository for data access."""

from sqlalchemy.orm import Session

from app.models.review_response import ReviewResponse


class ReviewResponseRepository:
    """Repository for ReviewResponse model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_review(self, review_id: int) -> ReviewResponse | None:
        return (
            self.db.query(ReviewResponse)
            .filter(ReviewResponse.review_id == review_id)
            .first()
        )

    def get_by_reviews(self, review_ids: list[int]) -> dict[int, ReviewResponse]:
        if not review_ids:
            return {}
        rows = (
            self.db.query(ReviewResponse)
            .filter(ReviewResponse.review_id.in_(review_ids))
            .all()
        )
        return {row.review_id: row for row in rows}  # type: ignore[misc]

    def create(self, review_id: int, responder_id: int, text: str) -> ReviewResponse:
        response = ReviewResponse(review_id=review_id, responder_id=responder_id, response=text)
        self.db.add(response)
        self.db.commit()
        self.db.refresh(response)
        return response

    def update(self, response: ReviewResponse, text: str) -> ReviewResponse:
        response.response = text  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(response)
        return response

    def delete(self, response: ReviewResponse) -> None:
        self.db.delete(response)
        self.db.commit()
