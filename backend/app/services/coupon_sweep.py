"""Scheduled expiry of lapsed coupons."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from app.models.shared import utc_now
from app.repositories.coupon_repository import CouponRepository
from app.repositories.customer_coupon_repository import CustomerCouponRepository

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    expired_coupon_ids: list[int] = field(default_factory=list)
    expired_instances: int = 0
    deleted_coupons: int = 0


class CouponSweepService:
    """Expires unredeemed instances of lapsed coupons, then deletes the coupons.

    Coupon deletion cascades to any remaining instances and redemptions.
    """

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.customer_coupon_repo = CustomerCouponRepository(db)

    def sweep_expired(self, now: datetime | None = None) -> SweepResult:
        now = now or utc_now()

        try:
            coupon_ids = self.coupon_repo.get_expired_ids(now)
            if not coupon_ids:
                logger.info("Coupon sweep found nothing to expire")
                return SweepResult()

            expired = self.customer_coupon_repo.expire_active_for_coupons(coupon_ids)
            deleted = self.coupon_repo.delete_by_ids(coupon_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Coupon sweep expired %d instance(s) and deleted %d coupon(s)",
            expired,
            deleted,
        )
        return SweepResult(
            expired_coupon_ids=coupon_ids,
            expired_instances=expired,
            deleted_coupons=deleted,
        )
