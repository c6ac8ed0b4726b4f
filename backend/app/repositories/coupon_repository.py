"""Coupon repository for data access."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.coupon import Coupon, CouponStatus
from app.schemas.coupon import CouponCreate


class CouponRepository:
    """Repository for Coupon model.

    Writes only flush; the coupon ledger services own the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100) -> list[Coupon]:
        return (
            self.db.query(Coupon)
            .order_by(Coupon.created_at.desc(), Coupon.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_salon(self, salon_id: int, status: CouponStatus | None = None) -> list[Coupon]:
        query = self.db.query(Coupon).filter(Coupon.salon_id == salon_id)
        if status:
            query = query.filter(Coupon.status == status.value)
        return query.order_by(Coupon.valid_to.asc(), Coupon.id.asc()).all()

    def get_for_salon(self, coupon_id: int, salon_id: int) -> Coupon | None:
        """Get a coupon by id, scoped to the salon that owns it."""
        return (
            self.db.query(Coupon)
            .filter(Coupon.id == coupon_id, Coupon.salon_id == salon_id)
            .first()
        )

    def get_by_code(self, salon_id: int, code: str, for_update: bool = False) -> Coupon | None:
        """Get a coupon by its per-salon code.

        ``for_update`` takes a row lock for the rest of the transaction on
        engines that support it (ignored by SQLite).
        """
        query = self.db.query(Coupon).filter(Coupon.salon_id == salon_id, Coupon.code == code)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def code_exists(self, salon_id: int, code: str) -> bool:
        return self.get_by_code(salon_id, code) is not None

    def create(self, salon_id: int, data: CouponCreate) -> Coupon:
        coupon = Coupon(
            salon_id=salon_id,
            code=data.code,
            description=data.description,
            discount=data.discount,
            price=data.price,
            max_usage=data.max_usage,
            valid_from=data.valid_from,
            valid_to=data.valid_to,
            status=data.status.value,
        )
        self.db.add(coupon)
        self.db.flush()
        return coupon

    def get_expired_ids(self, now: datetime) -> list[int]:
        """Ids of coupons whose validity window closed before ``now``."""
        rows = self.db.query(Coupon.id).filter(Coupon.valid_to < now).all()
        return [row.id for row in rows]

    def delete_by_ids(self, coupon_ids: list[int]) -> int:
        if not coupon_ids:
            return 0
        count = (
            self.db.query(Coupon)
            .filter(Coupon.id.in_(coupon_ids))
            .delete(synchronize_session=False)
        )
        return int(count)
