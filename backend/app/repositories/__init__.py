from app.repositories.city_repository import CityRepository
from app.repositories.coupon_redemption_repository import CouponRedemptionRepository
from app.repositories.coupon_repository import CouponRepository
from app.repositories.customer_coupon_repository import CustomerCouponRepository
from app.repositories.customer_membership_repository import CustomerMembershipRepository
from app.repositories.membership_plan_repository import MembershipPlanRepository
from app.repositories.review_image_repository import ReviewImageRepository
from app.repositories.review_like_repository import ReviewLikeRepository
from app.repositories.review_report_repository import ReviewReportRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.review_response_repository import ReviewResponseRepository
from app.repositories.salon_image_repository import SalonImageRepository
from app.repositories.salon_repository import SalonRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "CityRepository",
    "CouponRedemptionRepository",
    "CouponRepository",
    "CustomerCouponRepository",
    "CustomerMembershipRepository",
    "MembershipPlanRepository",
    "ReviewImageRepository",
    "ReviewLikeRepository",
    "ReviewReportRepository",
    "ReviewRepository",
    "ReviewResponseRepository",
    "SalonImageRepository",
    "SalonRepository",
    "UserRepository",
]
