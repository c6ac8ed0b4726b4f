"""Salon review model."""

from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.core.database import Base


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    HIDDEN = "hidden"


class Review(Base):
    __tablename__ = "salon_reviews"
    __table_args__ = (
        UniqueConstraint("salon_id", "user_id", name="uq_salon_reviews_salon_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_salon_reviews_rating"),
        Index("ix_salon_reviews_salon_status", "salon_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    salon_id = Column(Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating = Column(Integer, nullable=False)
    title = Column(String(200), nullable=True)
    comment = Column(Text, nullable=True)
    visit_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False, default=ReviewStatus.APPROVED.value)
    likes_count = Column(Integer, nullable=False, default=0)
    is_verified_visit = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
