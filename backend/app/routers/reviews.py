"""Salon review endpoints for customers and salon owners."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Principal, get_current_principal, get_optional_principal
from app.core.database import get_db
from app.core.sorting import Page
from app.models.review import ReviewStatus
from app.schemas.common import Envelope
from app.schemas.review import (
    LikeToggleResponse,
    OwnerResponseBody,
    OwnerResponseResponse,
    ReportCreate,
    ReportCreated,
    ReviewCreate,
    ReviewPage,
    ReviewResponse,
    ReviewUpdate,
    SalonReviewStats,
)
from app.services.review_service import ReviewService

router = APIRouter()


@router.get(
    "/salon/{salon_id}",
    response_model=Envelope[ReviewPage],
    summary="List reviews of a salon",
)
async def list_salon_reviews(
    salon_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: str = Query(default="created_at"),
    sort_order: str = Query(default="desc"),
    status: ReviewStatus | None = Query(default=ReviewStatus.APPROVED),
    rating: int | None = Query(default=None, ge=1, le=5),
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> Envelope[ReviewPage]:
    result = ReviewService(db).list_salon_reviews(
        salon_id,
        Page(page=page, limit=limit),
        status=status,
        rating=rating,
        sort_by=sort_by,
        sort_order=sort_order,
        viewer_id=principal.id if principal else None,
    )
    return Envelope(data=result)


@router.get(
    "/salon/{salon_id}/stats",
    response_model=Envelope[SalonReviewStats],
    summary="Review statistics of a salon",
    responses={404: {"description": "Salon not found"}},
)
async def salon_review_stats(
    salon_id: int, db: Session = Depends(get_db)
) -> Envelope[SalonReviewStats]:
    return Envelope(data=ReviewService(db).get_salon_stats(salon_id))


@router.get("/user/me", response_model=Envelope[ReviewPage], summary="List my reviews")
async def list_my_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[ReviewPage]:
    return Envelope(
        data=ReviewService(db).list_user_reviews(principal.id, Page(page=page, limit=limit))
    )


@router.post(
    "/",
    response_model=Envelope[ReviewResponse],
    status_code=201,
    summary="Create review",
    responses={
        404: {"description": "Salon not found"},
        409: {"description": "You have already reviewed this salon"},
    },
)
async def create_review(
    data: ReviewCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[ReviewResponse]:
    review = ReviewService(db).create_review(principal.id, data)
    return Envelope(message="Review submitted successfully", data=review)


@router.post(
    "/{review_id}/like",
    response_model=Envelope[LikeToggleResponse],
    summary="Like or unlike a review",
    responses={404: {"description": "Review not found"}},
)
async def toggle_like(
    review_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[LikeToggleResponse]:
    result = ReviewService(db).toggle_like(principal.id, review_id)
    return Envelope(message="Review liked" if result.liked else "Review unliked", data=result)


@router.post(
    "/{review_id}/report",
    response_model=Envelope[ReportCreated],
    status_code=201,
    summary="Report a review",
    responses={
        403: {"description": "You cannot report your own review"},
        404: {"description": "Review not found"},
        409: {"description": "You have already reported this review"},
    },
)
async def report_review(
    review_id: int,
    data: ReportCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[ReportCreated]:
    report = ReviewService(db).report_review(principal.id, review_id, data)
    return Envelope(
        message="Review reported successfully. Our team will review it shortly.",
        data=ReportCreated(id=report.id),  # type: ignore[arg-type]
    )


@router.post(
    "/{review_id}/response",
    response_model=Envelope[OwnerResponseResponse],
    status_code=201,
    summary="Respond to a review",
    responses={
        403: {"description": "Only salon owners can respond"},
        409: {"description": "A response already exists"},
    },
)
async def add_owner_response(
    review_id: int,
    data: OwnerResponseBody,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[OwnerResponseResponse]:
    result = ReviewService(db).add_owner_response(principal, review_id, data.response)
    return Envelope(message="Response added successfully", data=result)


@router.put(
    "/{review_id}/response",
    response_model=Envelope[OwnerResponseResponse],
    summary="Edit a review response",
)
async def update_owner_response(
    review_id: int,
    data: OwnerResponseBody,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[OwnerResponseResponse]:
    result = ReviewService(db).update_owner_response(principal, review_id, data.response)
    return Envelope(message="Response updated successfully", data=result)


@router.delete(
    "/{review_id}/response",
    response_model=Envelope[None],
    summary="Delete a review response",
)
async def delete_owner_response(
    review_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[None]:
    ReviewService(db).delete_owner_response(principal, review_id)
    return Envelope(message="Response deleted successfully")


@router.get(
    "/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Get review",
    responses={404: {"description": "Review not found"}},
)
async def get_review(
    review_id: int,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_optional_principal),
) -> Envelope[ReviewResponse]:
    review = ReviewService(db).get_review(review_id, principal.id if principal else None)
    return Envelope(data=review)


@router.put(
    "/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Update review",
    responses={
        403: {"description": "Not the author"},
        404: {"description": "Review not found"},
    },
)
async def update_review(
    review_id: int,
    data: ReviewUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[ReviewResponse]:
    review = ReviewService(db).update_review(principal.id, review_id, data)
    return Envelope(message="Review updated successfully", data=review)


@router.delete(
    "/{review_id}",
    response_model=Envelope[None],
    summary="Delete review",
    responses={
        403: {"description": "Not the author"},
        404: {"description": "Review not found"},
    },
)
async def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Envelope[None]:
    ReviewService(db).delete_review(principal, review_id)
    return Envelope(message="Review deleted successfully")
