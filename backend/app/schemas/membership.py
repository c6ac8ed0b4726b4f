"""Membership plan and customer membership schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.salon_membership_plan import MembershipPlanStatus


class MembershipPlanCreate(BaseModel):
    name: str = Field(max_length=255)
    description: str | None = None
    price: Decimal = Field(ge=0)
    duration_days: int = Field(ge=1)
    status: MembershipPlanStatus = MembershipPlanStatus.ACTIVE


class MembershipPlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    salon_id: int
    name: str
    description: str | None = None
    price: Decimal
    duration_days: int
    status: str
    created_at: datetime | None = None


class MembershipPurchaseRequest(BaseModel):
    customer_id: int
    plan_id: int


class CustomerMembershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    salon_id: int
    plan_id: int
    start_date: datetime
    end_date: datetime
    status: str


class CustomerMembershipDetail(BaseModel):
    """Membership joined with its plan and salon, for customer listings."""

    customer_membership_id: int
    start_date: datetime
    end_date: datetime
    status: str
    plan_id: int
    plan_name: str
    price: Decimal
    duration_days: int
    salon_id: int
    salon_name: str
