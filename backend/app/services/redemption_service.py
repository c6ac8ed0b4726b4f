"""Redemption engine: turns a purchased coupon instance into a used one."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, PreconditionFailedError
from app.models.coupon_redemption import CouponRedemption, RedemptionStatus
from app.models.shared import utc_now
from app.repositories.coupon_redemption_repository import CouponRedemptionRepository
from app.repositories.coupon_repository import CouponRepository
from app.repositories.customer_coupon_repository import CustomerCouponRepository
from app.services.coupon_service import coupon_is_valid_at
from app.services.membership_service import MembershipService

logger = logging.getLogger(__name__)


class RedemptionService:
    """Redeems coupons and exposes the redemption audit trail."""

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.customer_coupon_repo = CustomerCouponRepository(db)
        self.redemption_repo = CouponRedemptionRepository(db)
        self.membership_service = MembershipService(db)

    def redeem_coupon(
        self,
        customer_id: int,
        salon_id: int,
        coupon_code: str,
        now: datetime | None = None,
    ) -> CouponRedemption:
        """Consume one active instance of ``coupon_code`` owned by the customer.

        The coupon row is locked for the duration of the transaction and the
        instance is flipped with a conditional update, so two concurrent
        redeems can neither use the same instance twice nor overshoot
        ``max_usage``. Any failure rolls the whole redemption back.

        Raises:
            NotFoundError: No coupon with this code at the salon.
            PreconditionFailedError: Membership missing (when required),
                outside the validity window, no active purchase, or the
                global usage limit has been reached.
        """
        now = now or utc_now()

        try:
            coupon = self.coupon_repo.get_by_code(salon_id, coupon_code, for_update=True)
            if not coupon:
                raise NotFoundError("Invalid coupon for this salon", code="coupon_not_found")

            if settings.COUPON_REDEMPTION_REQUIRES_MEMBERSHIP and not (
                self.membership_service.has_active_membership(customer_id, salon_id, now)
            ):
                raise PreconditionFailedError(
                    "No active membership for this salon", code="membership_required"
                )

            if not coupon_is_valid_at(coupon, now):
                raise PreconditionFailedError(
                    "Coupon expired or not active yet", code="coupon_not_valid_now"
                )

            instance = self.customer_coupon_repo.get_oldest_active(
                customer_id,
                coupon.id,  # type: ignore[arg-type]
            )
            if not instance:
                raise PreconditionFailedError(
                    "No active purchased coupon found for this customer",
                    code="no_active_purchase",
                )

            if settings.COUPON_ENFORCE_MAX_USAGE:
                redeemed = self.redemption_repo.count_redeemed(coupon.id)  # type: ignore[arg-type]
                if redeemed >= coupon.max_usage:
                    raise PreconditionFailedError(
                        "Coupon usage limit reached", code="usage_limit_reached"
                    )

            if not self.customer_coupon_repo.mark_used(instance.id):  # type: ignore[arg-type]
                raise PreconditionFailedError(
                    "No active purchased coupon found for this customer",
                    code="no_active_purchase",
                )

            redemption = self.redemption_repo.create(
                coupon_id=coupon.id,  # type: ignore[arg-type]
                customer_id=customer_id,
                redeemed_at=now,
                status=RedemptionStatus.REDEEMED,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(redemption)
        logger.info(
            "Customer %s redeemed coupon %s at salon %s (instance %s)",
            customer_id,
            coupon_code,
            salon_id,
            instance.id,
        )
        return redemption

    def list_redemptions(self, salon_id: int, coupon_id: int) -> list[CouponRedemption]:
        """Redemption history of one coupon, newest first."""
        if not self.coupon_repo.get_for_salon(coupon_id, salon_id):
            raise NotFoundError(
                f"Coupon {coupon_id} not found for this salon", code="coupon_not_found"
            )
        return self.redemption_repo.get_by_coupon(coupon_id)
