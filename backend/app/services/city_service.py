"""City catalog management."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, InputValidationError, NotFoundError
from app.models.city import City
from app.repositories.city_repository import CityRepository

logger = logging.getLogger(__name__)


class CityService:
    def __init__(self, db: Session):
        self.db = db
        self.city_repo = CityRepository(db)

    def add_city(self, name: str) -> City:
        name = name.strip()
        if not name:
            raise InputValidationError("City name is required")
        if self.city_repo.get_by_name(name):
            raise ConflictError("City already exists", code="city_exists")
        try:
            city = self.city_repo.create(name)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("City already exists", code="city_exists") from None
        logger.info("Added city %s (%s)", city.id, city.name)
        return city

    def add_bulk_cities(self, names: list[str]) -> list[str]:
        """Insert the names that do not exist yet and return them.

        Names are trimmed; blanks and repeats are dropped.
        """
        clean = list(dict.fromkeys(name.strip() for name in names if name and name.strip()))
        if not clean:
            raise InputValidationError("No valid city names provided")

        existing = self.city_repo.existing_names(clean)
        new_names = [name for name in clean if name not in existing]
        if new_names:
            self.city_repo.create_many(new_names)
            logger.info("Bulk added %d cities", len(new_names))
        return new_names

    def list_cities(self, active_only: bool = False) -> list[City]:
        return self.city_repo.get_all(active_only=active_only)

    def set_active(self, city_id: int, is_active: bool) -> City:
        city = self._get(city_id)
        return self.city_repo.set_active(city, is_active)

    def delete_city(self, city_id: int) -> None:
        """Hard delete; the city's salons go with it."""
        city = self._get(city_id)
        self.city_repo.delete(city)
        logger.info("Deleted city %s", city_id)

    def _get(self, city_id: int) -> City:
        city = self.city_repo.get_by_id(city_id)
        if not city:
            raise NotFoundError("City not found", code="city_not_found")
        return city
