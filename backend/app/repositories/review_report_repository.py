"""ReviewReport repository for data access."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.core.sorting import Page
from app.models.review_report import ReportReason, ReportStatus, ReviewReport


class ReviewReportRepository:
    """Repository for ReviewReport model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, report_id: int) -> ReviewReport | None:
        return self.db.query(ReviewReport).filter(ReviewReport.id == report_id).first()

    def exists(self, review_id: int, user_id: int) -> bool:
        return (
            self.db.query(ReviewReport.id)
            .filter(ReviewReport.review_id == review_id, ReviewReport.user_id == user_id)
            .first()
            is not None
        )

    def create(
        self,
        review_id: int,
        user_id: int,
        reason: ReportReason,
        description: str | None = None,
    ) -> ReviewReport:
        report = ReviewReport(
            review_id=review_id,
            user_id=user_id,
            reason=reason.value,
            description=description,
            status=ReportStatus.PENDING.value,
        )
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        return report

    def list_by_status(self, status: ReportStatus, page: Page) -> tuple[list[ReviewReport], int]:
        query = self.db.query(ReviewReport).filter(ReviewReport.status == status.value)
        total = query.count()
        rows = (
            query.order_by(ReviewReport.created_at.desc(), ReviewReport.id.desc())
            .offset(page.offset)
            .limit(page.limit)
            .all()
        )
        return rows, total

    def resolve(
        self, report: ReviewReport, status: ReportStatus, reviewer_id: int, at: datetime
    ) -> ReviewReport:
        report.status = status.value  # type: ignore[assignment]
        report.reviewed_by = reviewer_id  # type: ignore[assignment]
        report.reviewed_at = at  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(report)
        return report
