from app.schemas.city import CityBulkCreate, CityBulkResult, CityCreate, CityResponse
from app.schemas.common import Envelope, ErrorEnvelope, MessageResponse, Pagination
from app.schemas.coupon import (
    BuyCouponRequest,
    CartItem,
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
from app.schemas.membership import (
    CustomerMembershipDetail,
    CustomerMembershipResponse,
    MembershipPlanCreate,
    MembershipPlanResponse,
    MembershipPurchaseRequest,
)
from app.schemas.review import (
    ReportCreate,
    ReviewCreate,
    ReviewPage,
    ReviewResponse,
    ReviewUpdate,
    SalonReviewStats,
)
from app.schemas.salon import SalonCreate, SalonResponse, SalonUpdate
from app.schemas.user import UserCreate, UserResponse

__all__ = [
    "BuyCouponRequest",
    "CartItem",
    "CityBulkCreate",
    "CityBulkResult",
    "CityCreate",
    "CityResponse",
    "CouponCreate",
    "CouponRedemptionResponse",
    "CouponResponse",
    "CustomerCouponResponse",
    "CustomerMembershipDetail",
    "CustomerMembershipResponse",
    "Envelope",
    "ErrorEnvelope",
    "MembershipPlanCreate",
    "MembershipPlanResponse",
    "MembershipPurchaseRequest",
    "MessageResponse",
    "Pagination",
    "PurchaseCouponsRequest",
    "PurchaseLineResponse",
    "PurchasedCouponResponse",
    "RedeemCouponRequest",
    "ReportCreate",
    "ReviewCreate",
    "ReviewPage",
    "ReviewResponse",
    "ReviewUpdate",
    "SalonCreate",
    "SalonResponse",
    "SalonReviewStats",
    "SalonUpdate",
    "SweepJobResponse",
    "SweepResultResponse",
    "UserCreate",
    "UserResponse",
]
