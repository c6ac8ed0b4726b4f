"""Review, report and owner-response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.review import ReviewStatus
from app.models.review_report import ReportReason, ReportStatus
from app.schemas.common import Pagination


class ReviewCreate(BaseModel):
    salon_id: int
    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = None
    visit_date: datetime | None = None
    images: list[str] = Field(default_factory=list)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = None
    visit_date: datetime | None = None
    images: list[str] | None = None


class ReviewImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    image_url: str
    display_order: int


class OwnerResponseBody(BaseModel):
    response: str = Field(min_length=1)


class OwnerResponseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    review_id: int
    responder_id: int
    responder_name: str | None = None
    response: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    salon_id: int
    user_id: int
    user_name: str | None = None
    salon_name: str | None = None
    rating: int
    title: str | None = None
    comment: str | None = None
    visit_date: datetime | None = None
    status: str
    likes_count: int
    is_verified_visit: bool
    images: list[ReviewImageResponse] = Field(default_factory=list)
    owner_response: OwnerResponseResponse | None = None
    is_liked_by_user: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewPage(BaseModel):
    reviews: list[ReviewResponse]
    pagination: Pagination


class LikeToggleResponse(BaseModel):
    liked: bool
    likes_count: int


class ReportCreate(BaseModel):
    reason: ReportReason
    description: str | None = None


class ReportCreated(BaseModel):
    id: int


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    review_id: int
    user_id: int
    reason: str
    description: str | None = None
    status: str
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class ReportPage(BaseModel):
    reports: list[ReportResponse]
    pagination: Pagination


class ModerateRequest(BaseModel):
    status: ReviewStatus


class ModerationResult(BaseModel):
    review_id: int
    new_status: str


class HandleReportRequest(BaseModel):
    status: ReportStatus


class RatingBucket(BaseModel):
    count: int
    percentage: str


class RatingDistribution(BaseModel):
    five_star: RatingBucket
    four_star: RatingBucket
    three_star: RatingBucket
    two_star: RatingBucket
    one_star: RatingBucket


class RecentActivity(BaseModel):
    last_30_days_reviews: int
    last_30_days_average: str


class SalonReviewStats(BaseModel):
    salon_id: int
    total_reviews: int
    average_rating: str
    verified_reviews: int
    reviews_with_images: int
    rating_distribution: RatingDistribution
    recent_activity: RecentActivity
