"""CouponRedemption repository for data access."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.coupon import Coupon
from app.models.coupon_redemption import CouponRedemption, RedemptionStatus


class CouponRedemptionRepository:
    """Repository for CouponRedemption model. Rows are append-only."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        coupon_id: int,
        customer_id: int,
        redeemed_at: datetime,
        status: RedemptionStatus = RedemptionStatus.REDEEMED,
    ) -> CouponRedemption:
        redemption = CouponRedemption(
            coupon_id=coupon_id,
            customer_id=customer_id,
            status=status.value,
            redeemed_at=redeemed_at,
        )
        self.db.add(redemption)
        self.db.flush()
        return redemption

    def count_redeemed(self, coupon_id: int) -> int:
        return (
            self.db.query(func.count(CouponRedemption.id))
            .filter(
                CouponRedemption.coupon_id == coupon_id,
                CouponRedemption.status == RedemptionStatus.REDEEMED.value,
            )
            .scalar()
            or 0
        )

    def get_by_coupon(self, coupon_id: int) -> list[CouponRedemption]:
        return (
            self.db.query(CouponRedemption)
            .filter(CouponRedemption.coupon_id == coupon_id)
            .order_by(CouponRedemption.redeemed_at.desc(), CouponRedemption.id.desc())
            .all()
        )

    def has_redeemed_at_salon(self, customer_id: int, salon_id: int) -> bool:
        """Whether the customer ever redeemed a coupon of this salon (a verified visit)."""
        row = (
            self.db.query(CouponRedemption.id)
            .join(Coupon, CouponRedemption.coupon_id == Coupon.id)
            .filter(
                Coupon.salon_id == salon_id,
                CouponRedemption.customer_id == customer_id,
                CouponRedemption.status == RedemptionStatus.REDEEMED.value,
            )
            .first()
        )
        return row is not None
