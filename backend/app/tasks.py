"""Helpers for handing work to the arq worker over Redis."""

from typing import Any

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from app.core.config import settings
from app.models.shared import utc_now

redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)

COUPON_SWEEP_TASK = "expire_coupons_task"


async def get_redis_pool() -> ArqRedis:
    return await create_pool(redis_settings)


async def enqueue_task(task_name: str, *args: Any, **kwargs: Any) -> Job | None:
    """Queue ``task_name`` for the worker.

    Keyword arguments are passed through to ``enqueue_job``, so arq options
    such as ``_job_id`` work here. Returns None when arq refuses a duplicate
    job id.
    """
    pool = await get_redis_pool()
    try:
        return await pool.enqueue_job(task_name, *args, **kwargs)
    finally:
        await pool.close()


async def enqueue_coupon_sweep() -> Job | None:
    """Run the expired-coupon sweep now instead of waiting for midnight.

    Repeated requests within the same minute collapse into one job.
    """
    job_id = f"{COUPON_SWEEP_TASK}:{utc_now():%Y%m%d%H%M}"
    return await enqueue_task(COUPON_SWEEP_TASK, _job_id=job_id)
