"""Per-client request throttling for the public API."""

import time
from collections import defaultdict, deque
from threading import Lock

from fastapi import HTTPException, Request

from app.core.config import settings


class RateLimiter:
    """Sliding-window limiter keyed by an arbitrary string (client address)."""

    def __init__(self, max_requests: int, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()
        self._last_sweep = 0.0

    def is_allowed(self, key: str) -> bool:
        """Record a hit for ``key`` and report whether it fits in the window."""
        now = time.monotonic()
        cutoff = now - self.window_seconds

        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._forget_idle(cutoff)
                self._last_sweep = now
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def _forget_idle(self, cutoff: float) -> None:
        """Drop keys whose every hit is older than ``cutoff``."""
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


api_rate_limiter = RateLimiter(
    max_requests=settings.RATE_LIMIT_REQUESTS_PER_MINUTE,
    window_seconds=60,
)


def check_rate_limit(request: Request) -> None:
    """Router dependency rejecting clients over the per-minute budget."""
    client = request.client.host if request.client else "anonymous"
    if not api_rate_limiter.is_allowed(client):
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Maximum "
            f"{settings.RATE_LIMIT_REQUESTS_PER_MINUTE} requests per minute.",
        )
