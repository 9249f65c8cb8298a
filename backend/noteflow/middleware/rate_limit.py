"""
NoteFlow Backend — AI Rate Limiting Middleware
================================================

What:  Per-client sliding window limit on POST /ai/* requests.
Why:   Every AI request spends provider tokens; an unthrottled client can
       run up the bill or exhaust the account's provider quota. Notes,
       sign-in and health traffic cost nothing and are never limited.
How:   One deque of request timestamps per client IP. Timestamps older than
       the window fall off the left; a full deque means 429.

Limitations:
    In-memory state is per process. With several uvicorn workers each worker
    enforces its own limit. Behind a reverse proxy every client shares the
    proxy's IP.
"""

import logging
import math
import time
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from noteflow.config import settings

logger = logging.getLogger(__name__)


class SlidingWindow:
    """Timestamps of recent requests per client key."""

    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = time.monotonic()

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int]:
        """
        Record one request for `key`.

        Returns (allowed, retry_after_seconds). A rejected request is not
        recorded, so hammering a full window does not extend it.
        """
        now = time.monotonic() if now is None else now
        hits = self._hits.setdefault(key, deque())
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

        if len(hits) >= self.limit:
            return False, max(1, math.ceil(hits[0] + self.window_seconds - now))

        hits.append(now)
        self._sweep(now)
        return True, 0

    def _sweep(self, now: float) -> None:
        # Drop idle clients at most once per window
        if now - self._last_sweep < self.window_seconds:
            return
        cutoff = now - self.window_seconds
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]
        self._last_sweep = now
        if idle:
            logger.debug("Rate limiter dropped %d idle clients", len(idle))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Limits AI requests per client IP.

    Configuration (from settings unless overridden):
        rate_limit_requests: AI requests allowed per window (default: 100)
        rate_limit_window:   Window length in seconds (default: 3600)

    On rejection: HTTP 429, Retry-After header and the standard envelope
        {"error": "Too many requests. Please wait N seconds before retrying.",
         "details": "retry_after=N"}
    """

    LIMITED_PREFIX = "/ai/"

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.window = SlidingWindow(
            limit=max_requests or settings.rate_limit_requests,
            window_seconds=window_seconds or settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self.LIMITED_PREFIX):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, retry_after = self.window.hit(client)
        if allowed:
            return await call_next(request)

        logger.warning(
            "AI rate limit reached for %s on %s (%d per %ds)",
            client,
            request.url.path,
            self.window.limit,
            self.window.window_seconds,
        )
        return JSONResponse(
            status_code=429,
            content={
                "error": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                "details": f"retry_after={retry_after}",
            },
            headers={"Retry-After": str(retry_after)},
        )
