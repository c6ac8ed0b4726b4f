"""Coupon, purchase and redemption schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.coupon import CouponStatus
from app.models.shared import ensure_utc


class CouponCreate(BaseModel):
    code: str = Field(min_length=1, max_length=255)
    description: str | None = None
    discount: Decimal = Field(ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    max_usage: int = Field(ge=1)
    valid_from: datetime
    valid_to: datetime
    status: CouponStatus = CouponStatus.ACTIVE

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "CouponCreate":
        if self.valid_to <= self.valid_from:
            raise ValueError("valid_to must be after valid_from")
        return self


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    salon_id: int
    code: str
    description: str | None = None
    discount: Decimal
    price: Decimal
    max_usage: int
    valid_from: datetime
    valid_to: datetime
    status: str
    created_at: datetime | None = None


class BuyCouponRequest(BaseModel):
    customer_id: int
    quantity: int = Field(default=1, ge=1)


class CartItem(BaseModel):
    coupon_id: int
    quantity: int = Field(default=1, ge=1)


class PurchaseCouponsRequest(BaseModel):
    customer_id: int
    items: list[CartItem] = Field(min_length=1)


class CustomerCouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    coupon_id: int
    customer_id: int
    status: str
    purchased_at: datetime


class PurchaseLineResponse(BaseModel):
    coupon_id: int
    quantity: int
    status: str = "purchased"
    purchase_ids: list[int]


class PurchasedCouponResponse(BaseModel):
    """One owned instance joined with its coupon definition."""

    purchase_id: int
    purchase_status: str
    purchased_at: datetime
    coupon: CouponResponse


class RedeemCouponRequest(BaseModel):
    customer_id: int
    coupon_code: str = Field(min_length=1, max_length=255)


class CouponRedemptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    coupon_id: int
    customer_id: int
    status: str
    redeemed_at: datetime


class SweepResultResponse(BaseModel):
    expired_coupon_ids: list[int]
    expired_instances: int
    deleted_coupons: int


class SweepJobResponse(BaseModel):
    job_id: str | None
    queued: bool
