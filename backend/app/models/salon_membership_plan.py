"""Membership plans a salon sells to its customers."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func

from app.core.database import Base


class MembershipPlanStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SalonMembershipPlan(Base):
    __tablename__ = "salon_membership_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    salon_id = Column(
        Integer, ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration_days = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=MembershipPlanStatus.ACTIVE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
