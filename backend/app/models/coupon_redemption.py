"""CouponRedemption model: append-only audit trail of coupon consumption."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.core.database import Base
from app.models.shared import utc_now


class RedemptionStatus(str, Enum):
    PENDING = "pending"
    REDEEMED = "redeemed"
    CANCELLED = "cancelled"


class CouponRedemption(Base):
    __tablename__ = "coupon_redemptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    coupon_id = Column(
        Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default=RedemptionStatus.PENDING.value)
    redeemed_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
