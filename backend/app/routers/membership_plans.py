"""Salon membership plan API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import Principal, ensure_can_act_for, get_current_principal, require_admin
from app.core.database import get_db
from app.schemas.common import Envelope
from app.schemas.coupon import CouponResponse
from app.schemas.membership import (
    CustomerMembershipResponse,
    MembershipPlanCreate,
    MembershipPlanResponse,
    MembershipPurchaseRequest,
)
from app.services.coupon_service import CouponLedgerService
from app.services.membership_service import MembershipService

router = APIRouter()


@router.post(
    "/{salon_id}",
    response_model=Envelope[MembershipPlanResponse],
    status_code=201,
    summary="Create membership plan",
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Salon not found"},
    },
)
async def create_plan(
    salon_id: int,
    data: MembershipPlanCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[MembershipPlanResponse]:
    plan = MembershipService(db).create_plan(salon_id, data)
    return Envelope(message="Membership plan created", data=MembershipPlanResponse.model_validate(plan))


@router.get(
    "/{salon_id}",
    response_model=Envelope[list[MembershipPlanResponse]],
    summary="List active plans of a salon",
)
async def list_plans(
    salon_id: int,
    db: Session = Depends(get_db),
) -> Envelope[list[MembershipPlanResponse]]:
    plans = MembershipService(db).list_plans(salon_id)
    return Envelope(data=[MembershipPlanResponse.model_validate(p) for p in plans])


@router.post(
    "/{salon_id}/purchase",
    response_model=Envelope[CustomerMembershipResponse],
    status_code=201,
    summary="Purchase a membership",
    responses={
        400: {"description": "Plan is not active"},
        404: {"description": "Plan or customer not found"},
        409: {"description": "Customer already has an active membership"},
    },
)
async def purchase_membership(
    salon_id: int,
    data: MembershipPurchaseRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[CustomerMembershipResponse]:
    ensure_can_act_for(principal, data.customer_id)
    membership = MembershipService(db).purchase_membership(data.customer_id, salon_id, data.plan_id)
    return Envelope(
        message="Membership purchased successfully",
        data=CustomerMembershipResponse.model_validate(membership),
    )


@router.get(
    "/{salon_id}/{customer_id}/coupons",
    response_model=Envelope[list[CouponResponse]],
    summary="List coupons available to a member",
    responses={400: {"description": "No active membership for this salon"}},
)
async def list_member_coupons(
    salon_id: int,
    customer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[CouponResponse]]:
    ensure_can_act_for(principal, customer_id)
    coupons = CouponLedgerService(db).get_coupons_for_customer(customer_id, salon_id)
    return Envelope(data=[CouponResponse.model_validate(c) for c in coupons])
