"""Per-client admission control for the generation endpoint.

A sliding-window limiter keyed by client IP. State lives in the limiter
instance (one per process), so several server instances each enforce
their own quota.
"""

import logging
import time
from typing import Callable, Protocol

from fastapi import Request

from .config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS, TRUST_PROXY_HEADERS

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    """Anything that can admit or reject a request for a key."""

    def admit(self, key: str) -> bool: ...


class SlidingWindowRateLimiter:
    """In-memory sliding-window limiter.

    Keeps, per key, the timestamps of admitted requests inside the trailing
    window. Old timestamps are pruned lazily on every check. `admit` never
    awaits, so it is atomic on the event loop.
    """

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._requests: dict[str, list[float]] = {}

    def admit(self, key: str) -> bool:
        """Record and admit a request for `key`, or reject it if over quota."""
        now = self.clock()
        recent = [t for t in self._requests.get(key, []) if now - t < self.window_seconds]

        if len(recent) >= self.max_requests:
            return False

        recent.append(now)
        self._requests[key] = recent
        return True


def get_client_ip(request: Request) -> str:
    """Get the real client IP, accounting for reverse proxies.

    Only checks X-Forwarded-For and X-Real-IP headers if TRUST_PROXY_HEADERS
    is enabled. This prevents IP spoofing when the app is directly exposed.
    """
    if TRUST_PROXY_HEADERS:
        # X-Forwarded-For may contain multiple IPs: client, proxy1, proxy2
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()

    # Fall back to direct connection IP
    return request.client.host if request.client else "unknown"
