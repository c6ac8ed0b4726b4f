"""Coupon catalog, purchase and redemption API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Principal, ensure_can_act_for, get_current_principal, require_admin
from app.core.database import get_db
from app.schemas.common import Envelope
from app.schemas.coupon import (
    BuyCouponRequest,
    CouponCreate,
    CouponRedemptionResponse,
    CouponResponse,
    CustomerCouponResponse,
    PurchaseCouponsRequest,
    PurchasedCouponResponse,
    PurchaseLineResponse,
    RedeemCouponRequest,
    SweepJobResponse,
    SweepResultResponse,
)
from app.services.coupon_service import CouponLedgerService
from app.services.coupon_sweep import CouponSweepService
from app.services.redemption_service import RedemptionService
from app.tasks import enqueue_coupon_sweep

router = APIRouter()


@router.post(
    "/sweep",
    response_model=Envelope[SweepResultResponse],
    summary="Expire lapsed coupons now",
    responses={403: {"description": "Admin access required"}},
)
async def sweep_expired_coupons(
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[SweepResultResponse]:
    """Run the nightly expiry sweep immediately."""
    result = CouponSweepService(db).sweep_expired()
    return Envelope(
        message=f"{result.deleted_coupons} expired coupon(s) removed",
        data=SweepResultResponse(
            expired_coupon_ids=result.expired_coupon_ids,
            expired_instances=result.expired_instances,
            deleted_coupons=result.deleted_coupons,
        ),
    )


@router.post(
    "/sweep/enqueue",
    response_model=Envelope[SweepJobResponse],
    status_code=202,
    summary="Queue the expiry sweep on the worker",
    responses={403: {"description": "Admin access required"}},
)
async def enqueue_expired_coupon_sweep(
    _: Principal = Depends(require_admin),
) -> Envelope[SweepJobResponse]:
    job = await enqueue_coupon_sweep()
    if job is None:
        return Envelope(
            message="Sweep already queued",
            data=SweepJobResponse(job_id=None, queued=False),
        )
    return Envelope(message="Sweep queued", data=SweepJobResponse(job_id=job.job_id, queued=True))


@router.post(
    "/{salon_id}",
    response_model=Envelope[CouponResponse],
    status_code=201,
    summary="Create coupon",
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Salon not found"},
        409: {"description": "Coupon code already exists for this salon"},
        422: {"description": "Validation error"},
    },
)
async def create_coupon(
    salon_id: int,
    data: CouponCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[CouponResponse]:
    coupon = CouponLedgerService(db).create_coupon(salon_id, data)
    return Envelope(message="Coupon created", data=CouponResponse.model_validate(coupon))


@router.get(
    "/",
    response_model=Envelope[list[CouponResponse]],
    summary="List all coupons",
    responses={403: {"description": "Admin access required"}},
)
async def list_all_coupons(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[list[CouponResponse]]:
    coupons = CouponLedgerService(db).list_all_coupons(skip=skip, limit=limit)
    return Envelope(data=[CouponResponse.model_validate(c) for c in coupons])


@router.get(
    "/customer/{customer_id}",
    response_model=Envelope[list[PurchasedCouponResponse]],
    summary="List coupons purchased by a customer",
    responses={403: {"description": "Not allowed to act for this customer"}},
)
async def list_customer_coupons(
    customer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[PurchasedCouponResponse]]:
    """Every owned instance in any status, joined with its coupon."""
    ensure_can_act_for(principal, customer_id)
    rows = CouponLedgerService(db).get_customer_purchased_coupons(customer_id)
    return Envelope(
        data=[
            PurchasedCouponResponse(
                purchase_id=instance.id,  # type: ignore[arg-type]
                purchase_status=instance.status,  # type: ignore[arg-type]
                purchased_at=instance.purchased_at,  # type: ignore[arg-type]
                coupon=CouponResponse.model_validate(coupon),
            )
            for instance, coupon in rows
        ]
    )


@router.get(
    "/{salon_id}",
    response_model=Envelope[list[CouponResponse]],
    summary="List coupons of a salon",
    responses={403: {"description": "Admin access required"}},
)
async def list_salon_coupons(
    salon_id: int,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[list[CouponResponse]]:
    coupons = CouponLedgerService(db).list_salon_coupons(salon_id)
    return Envelope(data=[CouponResponse.model_validate(c) for c in coupons])


@router.post(
    "/{salon_id}/{coupon_id}/buy",
    response_model=Envelope[list[CustomerCouponResponse]],
    status_code=201,
    summary="Buy units of one coupon",
    responses={
        400: {"description": "Membership required, coupon inactive or not valid now"},
        404: {"description": "Coupon or customer not found"},
    },
)
async def buy_coupon(
    salon_id: int,
    coupon_id: int,
    data: BuyCouponRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[CustomerCouponResponse]]:
    ensure_can_act_for(principal, data.customer_id)
    instances = CouponLedgerService(db).buy_coupon(
        data.customer_id, salon_id, coupon_id, quantity=data.quantity
    )
    return Envelope(
        message="Coupon purchased successfully",
        data=[CustomerCouponResponse.model_validate(i) for i in instances],
    )


@router.post(
    "/{salon_id}/purchase",
    response_model=Envelope[list[PurchaseLineResponse]],
    status_code=201,
    summary="Purchase a cart of coupons",
    responses={
        400: {"description": "Membership required, coupon inactive or not valid now"},
        404: {"description": "Coupon or customer not found"},
        422: {"description": "Empty cart or invalid quantity"},
    },
)
async def purchase_coupons(
    salon_id: int,
    data: PurchaseCouponsRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[list[PurchaseLineResponse]]:
    """All lines are bought in one transaction; one bad line buys nothing."""
    ensure_can_act_for(principal, data.customer_id)
    lines = CouponLedgerService(db).purchase_coupons(data.customer_id, salon_id, data.items)
    return Envelope(
        message="Coupons purchased successfully",
        data=[
            PurchaseLineResponse(
                coupon_id=line.coupon_id,
                quantity=line.quantity,
                purchase_ids=line.purchase_ids,
            )
            for line in lines
        ],
    )


@router.post(
    "/{salon_id}/redeem",
    response_model=Envelope[CouponRedemptionResponse],
    summary="Redeem a coupon",
    responses={
        400: {"description": "Not valid now, no active purchase or usage limit reached"},
        404: {"description": "Invalid coupon for this salon"},
    },
)
async def redeem_coupon(
    salon_id: int,
    data: RedeemCouponRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[CouponRedemptionResponse]:
    ensure_can_act_for(principal, data.customer_id)
    redemption = RedemptionService(db).redeem_coupon(data.customer_id, salon_id, data.coupon_code)
    return Envelope(
        message="Coupon redeemed successfully",
        data=CouponRedemptionResponse.model_validate(redemption),
    )


@router.get(
    "/{salon_id}/{coupon_id}/redemptions",
    response_model=Envelope[list[CouponRedemptionResponse]],
    summary="List redemptions of a coupon",
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Coupon not found"},
    },
)
async def list_redemptions(
    salon_id: int,
    coupon_id: int,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[list[CouponRedemptionResponse]]:
    redemptions = RedemptionService(db).list_redemptions(salon_id, coupon_id)
    return Envelope(data=[CouponRedemptionResponse.model_validate(r) for r in redemptions])
