"""City repository for data access."""

from sqlalchemy.orm import Session

from app.models.city import City


class CityRepository:
    """Repository for City model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, active_only: bool = False) -> list[City]:
        query = self.db.query(City)
        if active_only:
            query = query.filter(City.is_active.is_(True))
        return query.order_by(City.name.asc()).all()

    def get_by_id(self, city_id: int) -> City | None:
        return self.db.query(City).filter(City.id == city_id).first()

    def get_by_name(self, name: str) -> City | None:
        return self.db.query(City).filter(City.name == name).first()

    def existing_names(self, names: list[str]) -> set[str]:
        """Return which of ``names`` are already taken."""
        rows = self.db.query(City.name).filter(City.name.in_(names)).all()
        return {row.name for row in rows}

    def create(self, name: str) -> City:
        city = City(name=name, is_active=True)
        self.db.add(city)
        self.db.commit()
        self.db.refresh(city)
        return city

    def create_many(self, names: list[str]) -> list[City]:
        cities = [City(name=name, is_active=True) for name in names]
        self.db.add_all(cities)
        self.db.commit()
        return cities

    def set_active(self, city: City, is_active: bool) -> City:
        city.is_active = is_active  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(city)
        return city

    def delete(self, city: City) -> None:
        self.db.delete(city)
        self.db.commit()
