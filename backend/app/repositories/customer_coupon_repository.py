"""CustomerCoupon repository for data access."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.coupon import Coupon
from app.models.customer_coupon import CustomerCoupon, CustomerCouponStatus


class CustomerCouponRepository:
    """Repository for CustomerCoupon model.

    Writes only flush; the coupon ledger services own the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, customer_id: int, coupon_id: int, purchased_at: datetime) -> CustomerCoupon:
        instance = CustomerCoupon(
            customer_id=customer_id,
            coupon_id=coupon_id,
            status=CustomerCouponStatus.ACTIVE.value,
            purchased_at=purchased_at,
        )
        self.db.add(instance)
        self.db.flush()
        return instance

    def get_oldest_active(self, customer_id: int, coupon_id: int) -> CustomerCoupon | None:
        """Get the earliest-purchased active instance a customer holds for a coupon."""
        return (
            self.db.query(CustomerCoupon)
            .filter(
                CustomerCoupon.customer_id == customer_id,
                CustomerCoupon.coupon_id == coupon_id,
                CustomerCoupon.status == CustomerCouponStatus.ACTIVE.value,
            )
            .order_by(CustomerCoupon.purchased_at.asc(), CustomerCoupon.id.asc())
            .first()
        )

    def mark_used(self, customer_coupon_id: int) -> bool:
        """Flip one instance from active to used.

        Conditional on the row still being active, so a concurrent redeem of
        the same instance updates nothing and returns False.
        """
        count = (
            self.db.query(CustomerCoupon)
            .filter(
                CustomerCoupon.id == customer_coupon_id,
                CustomerCoupon.status == CustomerCouponStatus.ACTIVE.value,
            )
            .update(
                {CustomerCoupon.status: CustomerCouponStatus.USED.value},
                synchronize_session="fetch",
            )
        )
        return count == 1

    def expire_active_for_coupons(self, coupon_ids: list[int]) -> int:
        """Mark still-active instances of the given coupons as expired. Used rows are kept."""
        if not coupon_ids:
            return 0
        count = (
            self.db.query(CustomerCoupon)
            .filter(
                CustomerCoupon.coupon_id.in_(coupon_ids),
                CustomerCoupon.status == CustomerCouponStatus.ACTIVE.value,
            )
            .update(
                {CustomerCoupon.status: CustomerCouponStatus.EXPIRED.value},
                synchronize_session=False,
            )
        )
        return int(count)

    def get_with_coupons(self, customer_id: int) -> list[tuple[CustomerCoupon, Coupon]]:
        """Every instance owned by a customer with its coupon, newest purchase first."""
        rows = (
            self.db.query(CustomerCoupon, Coupon)
            .join(Coupon, CustomerCoupon.coupon_id == Coupon.id)
            .filter(CustomerCoupon.customer_id == customer_id)
            .order_by(CustomerCoupon.purchased_at.desc(), CustomerCoupon.id.desc())
            .all()
        )
        return [(instance, coupon) for instance, coupon in rows]

