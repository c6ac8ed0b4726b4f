import logging
from typing import Any
from zoneinfo import ZoneInfo

from arq import cron

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.coupon_sweep import CouponSweepService
from app.tasks import redis_settings

logger = logging.getLogger(__name__)


async def expire_coupons_task(ctx: dict[str, Any]) -> int:
    """Background task: expire unredeemed instances of lapsed coupons and delete the coupons.

    Runs daily at midnight in SWEEP_TIMEZONE.
    """
    db = SessionLocal()
    try:
        result = CouponSweepService(db).sweep_expired()
        if result.deleted_coupons > 0:
            logger.info(
                "Expired %d coupon instance(s) across %d coupon(s)",
                result.expired_instances,
                result.deleted_coupons,
            )
        return result.deleted_coupons
    finally:
        db.close()


class WorkerSettings:
    functions = [expire_coupons_task]
    cron_jobs = [
        cron(expire_coupons_task, hour=0, minute=0),  # midnight daily
    ]
    timezone = ZoneInfo(settings.SWEEP_TIMEZONE)
    redis_settings = redis_settings
