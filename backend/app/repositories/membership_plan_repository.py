"""SalonMembershipPlan repository for data access."""

from sqlalchemy.orm import Session

from app.models.salon_membership_plan import MembershipPlanStatus, SalonMembershipPlan
from app.schemas.membership import MembershipPlanCreate


class MembershipPlanRepository:
    """Repository for SalonMembershipPlan model."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_salon(self, plan_id: int, salon_id: int) -> SalonMembershipPlan | None:
        """Get a plan only if it belongs to ``salon_id``."""
        return (
            self.db.query(SalonMembershipPlan)
            .filter(
                SalonMembershipPlan.id == plan_id,
                SalonMembershipPlan.salon_id == salon_id,
            )
            .first()
        )

    def get_active_by_salon(self, salon_id: int) -> list[SalonMembershipPlan]:
        return (
            self.db.query(SalonMembershipPlan)
            .filter(
                SalonMembershipPlan.salon_id == salon_id,
                SalonMembershipPlan.status == MembershipPlanStatus.ACTIVE.value,
            )
            .order_by(SalonMembershipPlan.price.asc(), SalonMembershipPlan.id.asc())
            .all()
        )

    def create(self, salon_id: int, data: MembershipPlanCreate) -> SalonMembershipPlan:
        plan = SalonMembershipPlan(
            salon_id=salon_id,
            name=data.name,
            description=data.description,
            price=data.price,
            duration_days=data.duration_days,
            status=data.status.value,
        )
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        return plan
