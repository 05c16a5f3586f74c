"""Rate limiting dependency for HTTP routes."""

import logging
from datetime import datetime

from fastapi import HTTPException, Request, status

from tripplanner.ratelimit import RateLimiter, make_rate_limit_key

logger = logging.getLogger(__name__)


class RateLimitGuard:
    """FastAPI dependency that enforces a per-client bucket.

    The limiter is read from ``app.state.rate_limiter`` so each application
    instance carries its own.
    """

    def __init__(self, bucket: str) -> None:
        self._bucket = bucket

    def check_rate_limit(
        self, limiter: RateLimiter, client_id: str, now: datetime | None = None
    ) -> tuple[bool, int]:
        """Check if a request is allowed under the rate limit.

        Args:
            limiter: Rate limiter implementation
            client_id: Client identity (address)
            now: Current time (for testing)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        if now is None:
            now = datetime.now()

        key = make_rate_limit_key(client_id, self._bucket)
        retry_after = limiter.check_quota(key, now)

        if retry_after is None:
            return (True, 0)

        return (False, retry_after.seconds)

    async def __call__(self, request: Request) -> None:
        client_id = request.client.host if request.client else "unknown"
        allowed, retry_after = self.check_rate_limit(request.app.state.rate_limiter, client_id)

        if not allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"structured": {"bucket": self._bucket, "client": client_id}},
            )
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests, please try again later",
                headers={"Retry-After": str(retry_after)},
            )


auth_rate_limit = RateLimitGuard("auth")
