"""CustomerCoupon model: one purchased, individually redeemable coupon unit."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.core.database import Base
from app.models.shared import utc_now


class CustomerCouponStatus(str, Enum):
    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"


class CustomerCoupon(Base):
    __tablename__ = "customer_coupons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    coupon_id = Column(
        Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default=CustomerCouponStatus.ACTIVE.value)
    purchased_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
