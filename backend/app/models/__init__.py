from app.models.city import City
from app.models.coupon import Coupon, CouponStatus
from app.models.coupon_redemption import CouponRedemption, RedemptionStatus
from app.models.customer_coupon import CustomerCoupon, CustomerCouponStatus
from app.models.customer_membership import CustomerMembership, CustomerMembershipStatus
from app.models.review import Review, ReviewStatus
from app.models.review_image import ReviewImage
from app.models.review_like import ReviewLike
from app.models.review_report import ReportReason, ReportStatus, ReviewReport
from app.models.review_response import ReviewResponse
from app.models.salon import Salon
from app.models.salon_image import SalonImage, SalonImageType
from app.models.salon_membership_plan import MembershipPlanStatus, SalonMembershipPlan
from app.models.user import User, UserRole

__all__ = [
    "City",
    "Coupon",
    "CouponRedemption",
    "CouponStatus",
    "CustomerCoupon",
    "CustomerCouponStatus",
    "CustomerMembership",
    "CustomerMembershipStatus",
    "MembershipPlanStatus",
    "RedemptionStatus",
    "ReportReason",
    "ReportStatus",
    "Review",
    "ReviewImage",
    "ReviewLike",
    "ReviewReport",
    "ReviewResponse",
    "ReviewStatus",
    "Salon",
    "SalonImage",
    "SalonImageType",
    "SalonMembershipPlan",
    "User",
    "UserRole",
]
