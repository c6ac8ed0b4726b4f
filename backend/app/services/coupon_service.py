"""Coupon catalog and purchase ledger."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    ConflictError,
    InputValidationError,
    NotFoundError,
    PreconditionFailedError,
)
from app.models.coupon import Coupon, CouponStatus
from app.models.customer_coupon import CustomerCoupon
from app.models.shared import ensure_utc, utc_now
from app.repositories.coupon_repository import CouponRepository
from app.repositories.customer_coupon_repository import CustomerCouponRepository
from app.repositories.salon_repository import SalonRepository
from app.repositories.user_repository import UserRepository
from app.schemas.coupon import CartItem, CouponCreate
from app.services.membership_service import MembershipService

logger = logging.getLogger(__name__)


@dataclass
class PurchaseLine:
    """Instances created for one cart line."""

    coupon_id: int
    quantity: int
    instances: list[CustomerCoupon] = field(default_factory=list)

    @property
    def purchase_ids(self) -> list[int]:
        return [int(instance.id) for instance in self.instances]  # type: ignore[arg-type]


def coupon_is_valid_at(coupon: Coupon, now: datetime) -> bool:
    """Whether ``now`` falls inside the coupon's inclusive validity window."""
    valid_from = ensure_utc(coupon.valid_from)  # type: ignore[arg-type]
    valid_to = ensure_utc(coupon.valid_to)  # type: ignore[arg-type]
    return valid_from <= ensure_utc(now) <= valid_to


class CouponLedgerService:
    """Defines coupons per salon and records purchased coupon instances.

    Every purchase call runs in a single transaction: either all requested
    instances are written or none are.
    """

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.customer_coupon_repo = CustomerCouponRepository(db)
        self.salon_repo = SalonRepository(db)
        self.user_repo = UserRepository(db)
        self.membership_service = MembershipService(db)

    def create_coupon(self, salon_id: int, data: CouponCreate) -> Coupon:
        """Create a coupon for a salon.

        Raises:
            NotFoundError: The salon does not exist.
            ConflictError: The code is already used by this salon.
        """
        if not self.salon_repo.exists(salon_id):
            raise NotFoundError(f"Salon {salon_id} not found", code="salon_not_found")

        if self.coupon_repo.code_exists(salon_id, data.code):
            raise ConflictError(
                f"Coupon code '{data.code}' already exists for this salon",
                code="duplicate_code",
            )

        try:
            coupon = self.coupon_repo.create(salon_id, data)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                f"Coupon code '{data.code}' already exists for this salon",
                code="duplicate_code",
            ) from None

        self.db.refresh(coupon)
        logger.info("Created coupon %s (%s) for salon %s", coupon.id, coupon.code, salon_id)
        return coupon

    def list_salon_coupons(self, salon_id: int) -> list[Coupon]:
        return self.coupon_repo.get_by_salon(salon_id)

    def list_all_coupons(self, skip: int = 0, limit: int = 100) -> list[Coupon]:
        return self.coupon_repo.get_all(skip=skip, limit=limit)

    def get_coupons_for_customer(self, customer_id: int, salon_id: int) -> list[Coupon]:
        """Active coupons of a salon, visible only to its current members."""
        self._require_membership(customer_id, salon_id)
        return self.coupon_repo.get_by_salon(salon_id, CouponStatus.ACTIVE)

    def buy_coupon(
        self,
        customer_id: int,
        salon_id: int,
        coupon_id: int,
        quantity: int = 1,
        now: datetime | None = None,
    ) -> list[CustomerCoupon]:
        """Buy ``quantity`` units of one coupon. Returns the new instances."""
        if quantity < 1:
            raise InputValidationError("Quantity must be at least 1")
        lines = self.purchase_coupons(
            customer_id, salon_id, [CartItem(coupon_id=coupon_id, quantity=quantity)], now=now
        )
        return lines[0].instances

    def purchase_coupons(
        self,
        customer_id: int,
        salon_id: int,
        items: list[CartItem],
        now: datetime | None = None,
    ) -> list[PurchaseLine]:
        """Buy every cart line in one transaction.

        Each line is validated independently before anything is written; one
        bad line aborts the whole cart.

        Raises:
            InputValidationError: Empty cart or a quantity below one.
            NotFoundError: Unknown customer, or a coupon not sold by the salon.
            PreconditionFailedError: Membership missing, coupon inactive or
                outside its validity window.
        """
        if not items:
            raise InputValidationError("Cart is empty")
        for item in items:
            if item.quantity < 1:
                raise InputValidationError("Quantity must be at least 1")

        now = now or utc_now()

        if not self.user_repo.get_by_id(customer_id):
            raise NotFoundError(f"Customer {customer_id} not found", code="customer_not_found")
        if settings.COUPON_PURCHASE_REQUIRES_MEMBERSHIP:
            self._require_membership(customer_id, salon_id, now)

        coupons = [self._purchasable_coupon(item.coupon_id, salon_id, now) for item in items]

        lines: list[PurchaseLine] = []
        try:
            for item, coupon in zip(items, coupons, strict=True):
                line = PurchaseLine(coupon_id=int(coupon.id), quantity=item.quantity)  # type: ignore[arg-type]
                for _ in range(item.quantity):
                    line.instances.append(
                        self.customer_coupon_repo.create(
                            customer_id=customer_id,
                            coupon_id=coupon.id,  # type: ignore[arg-type]
                            purchased_at=now,
                        )
                    )
                lines.append(line)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Customer %s purchased %d coupon unit(s) at salon %s",
            customer_id,
            sum(line.quantity for line in lines),
            salon_id,
        )
        return lines

    def get_customer_purchased_coupons(
        self, customer_id: int
    ) -> list[tuple[CustomerCoupon, Coupon]]:
        """Every instance the customer owns, in any status, with its coupon."""
        return self.customer_coupon_repo.get_with_coupons(customer_id)

    def _require_membership(
        self, customer_id: int, salon_id: int, now: datetime | None = None
    ) -> None:
        if not self.membership_service.has_active_membership(customer_id, salon_id, now):
            raise PreconditionFailedError(
                "No active membership for this salon", code="membership_required"
            )

    def _purchasable_coupon(self, coupon_id: int, salon_id: int, now: datetime) -> Coupon:
        coupon = self.coupon_repo.get_for_salon(coupon_id, salon_id)
        if not coupon:
            raise NotFoundError(
                f"Coupon {coupon_id} not found for this salon", code="coupon_not_found"
            )
        if coupon.status != CouponStatus.ACTIVE.value:
            raise PreconditionFailedError(
                f"Coupon {coupon.code} is not active", code="coupon_inactive"
            )
        if not coupon_is_valid_at(coupon, now):
            raise PreconditionFailedError(
                f"Coupon {coupon.code} is expired or not yet valid",
                code="coupon_not_valid_now",
            )
        return coupon
