"""SalonImage repository for data access."""

from collections import defaultdict

from sqlalchemy.orm import Session

from app.models.salon_image import SalonImage, SalonImageType


class SalonImageRepository:
    """Repository for SalonImage model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, image_id: int) -> SalonImage | None:
        return self.db.query(SalonImage).filter(SalonImage.id == image_id).first()

    def urls_by_salon(self, salon_ids: list[int]) -> dict[int, list[str]]:
        """Map each salon id to its image URLs in insertion order."""
        result: dict[int, list[str]] = defaultdict(list)
        if not salon_ids:
            return result
        rows = (
            self.db.query(SalonImage.salon_id, SalonImage.image_url)
            .filter(SalonImage.salon_id.in_(salon_ids))
            .order_by(SalonImage.id.asc())
            .all()
        )
        for row in rows:
            result[row.salon_id].append(row.image_url)
        return result

    def add(
        self,
        salon_id: int,
        image_url: str,
        image_type: SalonImageType = SalonImageType.GALLERY,
        is_primary: bool = False,
    ) -> SalonImage:
        image = SalonImage(
            salon_id=salon_id,
            image_url=image_url,
            type=image_type.value,
            is_primary=is_primary,
        )
        self.db.add(image)
        self.db.flush()
        return image

    def add_many(self, salon_id: int, urls: list[str]) -> None:
        for url in urls:
            self.add(salon_id, url)

    def delete_for_salon(self, salon_id: int) -> list[str]:
        """Remove every image row of a salon and return the URLs that were removed."""
        images = self.db.query(SalonImage).filter(SalonImage.salon_id == salon_id).all()
        urls = [str(image.image_url) for image in images]
        for image in images:
            self.db.delete(image)
        self.db.flush()
        return urls

    def delete(self, image: SalonImage) -> None:
        self.db.delete(image)
        self.db.flush()
