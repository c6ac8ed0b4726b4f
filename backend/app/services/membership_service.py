"""Membership ledger: salon plans and customer entitlements."""

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, PreconditionFailedError
from app.models.customer_membership import CustomerMembership, CustomerMembershipStatus
from app.models.salon_membership_plan import MembershipPlanStatus, SalonMembershipPlan
from app.models.shared import ensure_utc, utc_now
from app.repositories.customer_membership_repository import CustomerMembershipRepository
from app.repositories.membership_plan_repository import MembershipPlanRepository
from app.repositories.salon_repository import SalonRepository
from app.repositories.user_repository import UserRepository
from app.schemas.membership import MembershipPlanCreate

logger = logging.getLogger(__name__)


class MembershipService:
    """Creates plans and grants time-bounded memberships to customers."""

    def __init__(self, db: Session):
        self.db = db
        self.plan_repo = MembershipPlanRepository(db)
        self.membership_repo = CustomerMembershipRepository(db)
        self.salon_repo = SalonRepository(db)
        self.user_repo = UserRepository(db)

    def create_plan(self, salon_id: int, data: MembershipPlanCreate) -> SalonMembershipPlan:
        if not self.salon_repo.exists(salon_id):
            raise NotFoundError(f"Salon {salon_id} not found", code="salon_not_found")
        plan = self.plan_repo.create(salon_id, data)
        logger.info("Created membership plan %s for salon %s", plan.id, salon_id)
        return plan

    def list_plans(self, salon_id: int) -> list[SalonMembershipPlan]:
        return self.plan_repo.get_active_by_salon(salon_id)

    def purchase_membership(
        self,
        customer_id: int,
        salon_id: int,
        plan_id: int,
        now: datetime | None = None,
    ) -> CustomerMembership:
        """Grant ``customer_id`` a membership at ``salon_id`` on ``plan_id``.

        The membership runs from ``now`` for the plan's ``duration_days``.
        A pair holding a current membership cannot buy another one; a lapsed
        row is reused for the new term.

        Raises:
            NotFoundError: Unknown customer, or plan not offered by the salon.
            PreconditionFailedError: The plan is inactive.
            ConflictError: The customer already holds a current membership.
        """
        now = now or utc_now()

        if not self.user_repo.get_by_id(customer_id):
            raise NotFoundError(f"Customer {customer_id} not found", code="customer_not_found")

        plan = self.plan_repo.get_for_salon(plan_id, salon_id)
        if not plan:
            raise NotFoundError("Plan not found for this salon", code="plan_not_found")
        if plan.status != MembershipPlanStatus.ACTIVE.value:
            raise PreconditionFailedError("Membership plan is not active", code="plan_inactive")

        end_date = now + timedelta(days=int(plan.duration_days))  # type: ignore[arg-type]

        try:
            existing = self.membership_repo.get_by_customer_and_salon(customer_id, salon_id)
            if existing is None:
                membership = self.membership_repo.create(
                    customer_id, salon_id, plan_id, start_date=now, end_date=end_date
                )
            elif _is_current(existing, now):
                raise ConflictError(
                    "Customer already has an active membership for this salon",
                    code="membership_exists",
                )
            else:
                membership = self.membership_repo.renew(
                    existing, plan_id, start_date=now, end_date=end_date
                )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                "Customer already has an active membership for this salon",
                code="membership_exists",
            ) from None
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(membership)
        logger.info(
            "Customer %s bought plan %s at salon %s until %s",
            customer_id,
            plan_id,
            salon_id,
            end_date.isoformat(),
        )
        return membership

    def has_active_membership(
        self, customer_id: int, salon_id: int, now: datetime | None = None
    ) -> CustomerMembership | None:
        """Return the pair's membership if it is active and has not ended."""
        return self.membership_repo.get_current(customer_id, salon_id, now or utc_now())

    def list_memberships(self, customer_id: int) -> list[dict[str, Any]]:
        return self.membership_repo.list_details(customer_id)

    def list_active_memberships(
        self, customer_id: int, now: datetime | None = None
    ) -> list[dict[str, Any]]:
        return self.membership_repo.list_details(customer_id, active_at=now or utc_now())


def _is_current(membership: CustomerMembership, now: datetime) -> bool:
    return bool(
        membership.status == CustomerMembershipStatus.ACTIVE.value
        and ensure_utc(membership.end_date) >= now  # type: ignore[arg-type]
    )
