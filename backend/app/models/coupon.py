"""Coupon model: a discount offer defined by one salon."""

from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.core.database import Base


class CouponStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Coupon(Base):
    """Coupon definition. Codes are unique per salon, not globally."""

    __tablename__ = "coupons"
    __table_args__ = (UniqueConstraint("salon_id", "code", name="uq_coupons_salon_code"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    salon_id = Column(
        Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    code = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    discount = Column(Numeric(5, 2), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    max_usage = Column(Integer, nullable=False)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_to = Column(DateTime(timezone=True), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=CouponStatus.ACTIVE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
