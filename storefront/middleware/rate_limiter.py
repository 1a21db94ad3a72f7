# ==============================================================================
# RATE LIMITER MIDDLEWARE
# ==============================================================================
# Per-client token bucket in front of the API routes
# ==============================================================================

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from storefront.core.exceptions import RateLimitError
from storefront.core.settings import settings

logger = logging.getLogger(__name__)


class TokenBucket:
    """
    Token buckets keyed by client.

    Each client holds up to ``capacity`` tokens; they refill linearly so
    a full bucket is restored after ``window_seconds``.
    """

    def __init__(
        self,
        capacity: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.capacity = capacity
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: Dict[str, Tuple[float, float]] = {}

    def take(self, client_id: str) -> Tuple[bool, int, int]:
        """
        Spend one token for ``client_id``.

        Returns:
            Tuple of (allowed, remaining, seconds until a token is available)
        """
        now = self._clock()
        tokens, last = self._buckets.get(client_id, (float(self.capacity), now))

        rate = self.capacity / self.window_seconds
        tokens = min(float(self.capacity), tokens + (now - last) * rate)

        if tokens >= 1:
            tokens -= 1
            self._buckets[client_id] = (tokens, now)
            return True, int(tokens), 0

        self._buckets[client_id] = (tokens, now)
        retry_after = max(1, int((1 - tokens) / rate + 0.999))
        return False, 0, retry_after


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware using the token bucket above.

    Clients are identified by ``X-Forwarded-For`` or the peer address.
    Rejections use the standard error envelope with status 429.
    """

    EXEMPT_PATHS = ("/", "/health")

    def __init__(
        self,
        app,
        requests_limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.requests_limit = requests_limit or settings.RATE_LIMIT_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW
        self._bucket = TokenBucket(self.requests_limit, self.window_seconds)

    @staticmethod
    def _get_client_id(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        if request.client:
            return request.client.host
        return "unknown"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        if not settings.RATE_LIMIT_ENABLED or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        client_id = self._get_client_id(request)
        allowed, remaining, retry_after = self._bucket.take(client_id)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client_id} on {request.url.path}")
            error = RateLimitError(retry_after=retry_after)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers={
                    "X-RateLimit-Limit": str(self.requests_limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
