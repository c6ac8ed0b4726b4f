"""Salon model.

``rating`` and ``total_reviews`` are derived from approved reviews and only
written by the review service.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    func,
)

from app.core.database import Base


class Salon(Base):
    __tablename__ = "salons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    city_id = Column(
        Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(150), nullable=False)
    owner_name = Column(String(100), nullable=True)
    email = Column(String(150), unique=True, nullable=True)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)
    services = Column(JSON, nullable=False, default=list)

    rating = Column(Numeric(2, 1), nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    opening_time = Column(Time, nullable=True)
    closing_time = Column(Time, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
