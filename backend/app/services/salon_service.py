"""Salon catalog management."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.models.salon import Salon
from app.repositories.city_repository import CityRepository
from app.repositories.salon_image_repository import SalonImageRepository
from app.repositories.salon_repository import SalonRepository
from app.schemas.salon import SalonCreate, SalonUpdate
from app.services.storage import ObjectStorage

logger = logging.getLogger(__name__)


@dataclass
class SalonWithImages:
    salon: Salon
    images: list[str] = field(default_factory=list)


class SalonService:
    """CRUD over salons and their image rows.

    Stored objects are removed best-effort after the database change has
    been committed.
    """

    def __init__(self, db: Session, storage: ObjectStorage | None = None):
        self.db = db
        self.storage = storage
        self.salon_repo = SalonRepository(db)
        self.image_repo = SalonImageRepository(db)
        self.city_repo = CityRepository(db)

    def add_salon(self, data: SalonCreate) -> SalonWithImages:
        if not self.city_repo.get_by_id(data.city_id):
            raise NotFoundError("City not found", code="city_not_found")

        fields = data.model_dump(exclude={"images"})
        try:
            salon = self.salon_repo.add(fields)
            self.image_repo.add_many(salon.id, data.images)  # type: ignore[arg-type]
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("A salon with this email already exists", code="salon_exists") from None

        self.db.refresh(salon)
        logger.info("Added salon %s (%s)", salon.id, salon.name)
        return SalonWithImages(salon=salon, images=list(data.images))

    def update_salon(self, salon_id: int, data: SalonUpdate) -> SalonWithImages:
        """Apply the given fields; a non-empty ``images`` list replaces all images."""
        salon = self._get(salon_id)
        fields = data.model_dump(exclude_unset=True, exclude={"images"})
        if "city_id" in fields and not self.city_repo.get_by_id(fields["city_id"]):
            raise NotFoundError("City not found", code="city_not_found")

        removed: list[str] = []
        try:
            self.salon_repo.apply_changes(salon, fields)
            if data.images:
                removed = self.image_repo.delete_for_salon(salon_id)
                self.image_repo.add_many(salon_id, data.images)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("A salon with this email already exists", code="salon_exists") from None

        self._delete_objects([url for url in removed if url not in (data.images or [])])
        self.db.refresh(salon)
        return SalonWithImages(salon=salon, images=self.image_repo.urls_by_salon([salon_id])[salon_id])

    def list_salons(
        self, city_id: int | None = None, is_active: bool | None = None
    ) -> list[SalonWithImages]:
        salons = self.salon_repo.get_all(city_id=city_id, is_active=is_active)
        images = self.image_repo.urls_by_salon([int(s.id) for s in salons])  # type: ignore[arg-type]
        return [SalonWithImages(salon=s, images=images.get(s.id, [])) for s in salons]  # type: ignore[call-overload]

    def get_salon(self, salon_id: int) -> SalonWithImages:
        salon = self._get(salon_id)
        return SalonWithImages(salon=salon, images=self.image_repo.urls_by_salon([salon_id])[salon_id])

    def delete_salon(self, salon_id: int) -> None:
        self._get(salon_id)
        urls = self.image_repo.urls_by_salon([salon_id])[salon_id]
        self.salon_repo.delete_many([salon_id])
        self.db.commit()
        self._delete_objects(urls)
        logger.info("Deleted salon %s", salon_id)

    def bulk_delete_salons(self, salon_ids: list[int]) -> int:
        images = self.image_repo.urls_by_salon(salon_ids)
        count = self.salon_repo.delete_many(salon_ids)
        self.db.commit()
        self._delete_objects([url for urls in images.values() for url in urls])
        logger.info("Bulk deleted %d salons", count)
        return count

    def set_active(self, salon_id: int, is_active: bool) -> Salon:
        salon = self._get(salon_id)
        self.salon_repo.apply_changes(salon, {"is_active": is_active})
        self.db.commit()
        self.db.refresh(salon)
        return salon

    def _get(self, salon_id: int) -> Salon:
        salon = self.salon_repo.get_by_id(salon_id)
        if not salon:
            raise NotFoundError("Salon not found", code="salon_not_found")
        return salon

    def _delete_objects(self, urls: list[str]) -> None:
        if self.storage is None:
            return
        for url in urls:
            if not self.storage.delete(url):
                logger.warning("Stored image %s was not removed", url)
