"""CustomerMembership repository for data access."""

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.models.customer_membership import CustomerMembership, CustomerMembershipStatus
from app.models.salon import Salon
from app.models.salon_membership_plan import SalonMembershipPlan


class CustomerMembershipRepository:
    """Repository for CustomerMembership model.

    Writes only flush; the membership service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_customer_and_salon(
        self, customer_id: int, salon_id: int
    ) -> CustomerMembership | None:
        return (
            self.db.query(CustomerMembership)
            .filter(
                CustomerMembership.customer_id == customer_id,
                CustomerMembership.salon_id == salon_id,
            )
            .first()
        )

    def get_current(
        self, customer_id: int, salon_id: int, now: datetime
    ) -> CustomerMembership | None:
        """Get the active, unexpired membership for the pair."""
        return (
            self.db.query(CustomerMembership)
            .filter(
                CustomerMembership.customer_id == customer_id,
                CustomerMembership.salon_id == salon_id,
                CustomerMembership.status == CustomerMembershipStatus.ACTIVE.value,
                CustomerMembership.end_date >= now,
            )
            .first()
        )

    def create(
        self,
        customer_id: int,
        salon_id: int,
        plan_id: int,
        start_date: datetime,
        end_date: datetime,
    ) -> CustomerMembership:
        membership = CustomerMembership(
            customer_id=customer_id,
            salon_id=salon_id,
            plan_id=plan_id,
            start_date=start_date,
            end_date=end_date,
            status=CustomerMembershipStatus.ACTIVE.value,
        )
        self.db.add(membership)
        self.db.flush()
        return membership

    def renew(
        self,
        membership: CustomerMembership,
        plan_id: int,
        start_date: datetime,
        end_date: datetime,
    ) -> CustomerMembership:
        """Reuse a lapsed row for a new purchase."""
        membership.plan_id = plan_id  # type: ignore[assignment]
        membership.start_date = start_date  # type: ignore[assignment]
        membership.end_date = end_date  # type: ignore[assignment]
        membership.status = CustomerMembershipStatus.ACTIVE.value  # type: ignore[assignment]
        self.db.flush()
        return membership

    def list_details(
        self, customer_id: int, active_at: datetime | None = None
    ) -> list[dict[str, Any]]:
        """Memberships of a customer joined with plan and salon.

        With ``active_at`` only active rows ending on or after that moment are
        returned, soonest-ending first; otherwise newest first.
        """
        query = (
            self.db.query(CustomerMembership, SalonMembershipPlan, Salon)
            .join(SalonMembershipPlan, CustomerMembership.plan_id == SalonMembershipPlan.id)
            .join(Salon, CustomerMembership.salon_id == Salon.id)
            .filter(CustomerMembership.customer_id == customer_id)
        )
        if active_at is not None:
            query = query.filter(
                CustomerMembership.status == CustomerMembershipStatus.ACTIVE.value,
                CustomerMembership.end_date >= active_at,
            ).order_by(CustomerMembership.end_date.asc())
        else:
            query = query.order_by(
                CustomerMembership.created_at.desc(), CustomerMembership.id.desc()
            )

        return [
            {
                "customer_membership_id": membership.id,
                "start_date": membership.start_date,
                "end_date": membership.end_date,
                "status": membership.status,
                "plan_id": plan.id,
                "plan_name": plan.name,
                "price": plan.price,
                "duration_days": plan.duration_days,
                "salon_id": salon.id,
                "salon_name": salon.name,
            }
            for membership, plan, salon in query.all()
        ]
