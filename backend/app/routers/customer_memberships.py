"""Customer membership listing endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import Principal, ensure_can_act_for, get_current_principal
from app.core.database import get_db
from app.schemas.common import Envelope
from app.schemas.membership import CustomerMembershipDetail
from app.services.membership_service import MembershipService

router = APIRouter()


@router.get(
    "/{customer_id}",
    response_model=Envelope[list[CustomerMembershipDetail]],
    summary="List a customer's memberships",
)
async def list_memberships(
    customer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[CustomerMembershipDetail]]:
    ensure_can_act_for(principal, customer_id)
    rows = MembershipService(db).list_memberships(customer_id)
    return Envelope(data=[CustomerMembershipDetail(**row) for row in rows])


@router.get(
    "/{customer_id}/active",
    response_model=Envelope[list[CustomerMembershipDetail]],
    summary="List a customer's current memberships",
)
async def list_active_memberships(
    customer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[CustomerMembershipDetail]]:
    ensure_can_act_for(principal, customer_id)
    rows = MembershipService(db).list_active_memberships(customer_id)
    return Envelope(data=[CustomerMembershipDetail(**row) for row in rows])
