"""A customer's time-bounded entitlement at one salon."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func

from app.core.database import Base


class CustomerMembershipStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class CustomerMembership(Base):
    __tablename__ = "customer_memberships"
    __table_args__ = (
        UniqueConstraint("customer_id", "salon_id", name="uq_customer_memberships_customer_salon"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    salon_id = Column(
        Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_id = Column(
        Integer,
        ForeignKey("salon_membership_plans.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default=CustomerMembershipStatus.ACTIVE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
