"""Salon repository for data access."""

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from app.models.salon import Salon


class SalonRepository:
    """Repository for Salon model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        city_id: int | None = None,
        is_active: bool | None = None,
    ) -> list[Salon]:
        query = self.db.query(Salon)
        if city_id is not None:
            query = query.filter(Salon.city_id == city_id)
        if is_active is not None:
            query = query.filter(Salon.is_active.is_(is_active))
        return query.order_by(Salon.id.asc()).all()

    def get_by_id(self, salon_id: int) -> Salon | None:
        return self.db.query(Salon).filter(Salon.id == salon_id).first()

    def get_names(self, salon_ids: set[int]) -> dict[int, str]:
        if not salon_ids:
            return {}
        rows = self.db.query(Salon.id, Salon.name).filter(Salon.id.in_(salon_ids)).all()
        return {row.id: row.name for row in rows}

    def exists(self, salon_id: int) -> bool:
        return self.db.query(Salon.id).filter(Salon.id == salon_id).first() is not None

    def add(self, fields: dict[str, Any]) -> Salon:
        """Stage a new salon; the caller commits."""
        salon = Salon(**fields, rating=Decimal("0"), total_reviews=0)
        self.db.add(salon)
        self.db.flush()
        return salon

    def apply_changes(self, salon: Salon, fields: dict[str, Any]) -> Salon:
        for key, value in fields.items():
            setattr(salon, key, value)
        self.db.flush()
        return salon

    def set_rating(self, salon_id: int, rating: Decimal, total_reviews: int) -> None:
        """Write the derived rating columns. Only the review service calls this."""
        self.db.query(Salon).filter(Salon.id == salon_id).update(
            {Salon.rating: rating, Salon.total_reviews: total_reviews},
            synchronize_session="fetch",
        )

    def delete_many(self, salon_ids: list[int]) -> int:
        count = (
            self.db.query(Salon)
            .filter(Salon.id.in_(salon_ids))
            .delete(synchronize_session=False)
        )
        return int(count)
