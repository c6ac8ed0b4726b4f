"""ReviewImage repository for data access."""

from collections import defaultdict

from sqlalchemy.orm import Session

from app.models.review_image import ReviewImage


class ReviewImageRepository:
    """Repository for ReviewImage model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_reviews(self, review_ids: list[int]) -> dict[int, list[ReviewImage]]:
        if not review_ids:
            return {}
        rows = (
            self.db.query(ReviewImage)
            .filter(ReviewImage.review_id.in_(review_ids))
            .order_by(ReviewImage.display_order.asc(), ReviewImage.id.asc())
            .all()
        )
        grouped: dict[int, list[ReviewImage]] = defaultdict(list)
        for image in rows:
            grouped[image.review_id].append(image)  # type: ignore[index]
        return dict(grouped)

    def replace(self, review_id: int, urls: list[str]) -> list[ReviewImage]:
        """Swap the review's images for ``urls``, keeping their order."""
        self.db.query(ReviewImage).filter(ReviewImage.review_id == review_id).delete(
            synchronize_session="fetch"
        )
        images = [
            ReviewImage(review_id=review_id, image_url=url, display_order=index)
            for index, url in enumerate(urls)
        ]
        self.db.add_all(images)
        self.db.flush()
        return images
