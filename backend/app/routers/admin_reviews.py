"""Review moderation endpoints for administrators."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Principal, require_admin
from app.core.database import get_db
from app.core.sorting import Page
from app.models.review import ReviewStatus
from app.models.review_report import ReportStatus
from app.schemas.common import Envelope
from app.schemas.review import (
    HandleReportRequest,
    ModerateRequest,
    ModerationResult,
    ReportPage,
    ReportResponse,
    ReviewPage,
)
from app.services.review_service import ReviewService

router = APIRouter()


@router.get("/", response_model=Envelope[ReviewPage], summary="List all reviews")
async def list_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: ReviewStatus | None = Query(default=None),
    salon_id: int | None = Query(default=None),
    user_id: int | None = Query(default=None),
    sort_by: str = Query(default="created_at"),
    sort_order: str = Query(default="desc"),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[ReviewPage]:
    result = ReviewService(db).list_all_reviews(
        Page(page=page, limit=limit),
        status=status,
        salon_id=salon_id,
        user_id=user_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return Envelope(data=result)


@router.get("/reports", response_model=Envelope[ReportPage], summary="List review reports")
async def list_reports(
    status: ReportStatus = Query(default=ReportStatus.PENDING),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[ReportPage]:
    reports, pagination = ReviewService(db).list_reports(Page(page=page, limit=limit), status)
    return Envelope(
        data=ReportPage(
            reports=[ReportResponse.model_validate(r) for r in reports],
            pagination=pagination,
        )
    )


@router.patch(
    "/reports/{report_id}",
    response_model=Envelope[ReportResponse],
    summary="Resolve a review report",
    responses={404: {"description": "Report not found"}},
)
async def handle_report(
    report_id: int,
    data: HandleReportRequest,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> Envelope[ReportResponse]:
    report = ReviewService(db).handle_report(report_id, data.status, admin.id)
    return Envelope(
        message=f"Report {data.status.value} successfully",
        data=ReportResponse.model_validate(report),
    )


@router.patch(
    "/{review_id}/moderate",
    response_model=Envelope[ModerationResult],
    summary="Change review status",
    responses={404: {"description": "Review not found"}},
)
async def moderate_review(
    review_id: int,
    data: ModerateRequest,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
) -> Envelope[ModerationResult]:
    ReviewService(db).moderate_review(review_id, data.status)
    return Envelope(
        message=f"Review {data.status.value} successfully",
        data=ModerationResult(review_id=review_id, new_status=data.status.value),
    )


@router.delete(
    "/{review_id}",
    response_model=Envelope[None],
    summary="Delete any review",
    responses={404: {"description": "Review not found"}},
)
async def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
) -> Envelope[None]:
    ReviewService(db).delete_review(admin, review_id)
    return Envelope(message="Review deleted successfully")
