"""Rate limiting utilities."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import redis

from tripplanner.config import Settings


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...


def make_rate_limit_key(client_id: str, bucket: str) -> str:
    """Create rate limit key from client identity and bucket.

    Args:
        client_id: Client address or user id
        bucket: Bucket name (e.g., "auth")

    Returns:
        Rate limit key
    """
    return f"{client_id}:{bucket}"


class RedisRateLimiter:
    """Redis-based rate limiter using INCR + EXPIRE pattern."""

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            redis_client: Redis client
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Uses Redis INCR + EXPIRE for atomic counting.
        """
        # Use a window-aligned key
        window_start = int(now.timestamp() / self._window_seconds) * self._window_seconds
        redis_key = f"ratelimit:{key}:{window_start}"

        count = self._redis.incr(redis_key)

        # Set expiry on first request
        if count == 1:
            self._redis.expire(redis_key, self._window_seconds)

        if count > self._max_requests:
            ttl = self._redis.ttl(redis_key)
            return RetryAfter(seconds=max(1, ttl))

        return None


class InMemoryRateLimiter:
    """In-process rate limiter using a fixed window per key.

    Expired windows are swept at most once per window length, so the map
    only holds keys seen within the last window.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        self._max_requests = max_requests
        self._window = timedelta(seconds=window_seconds)
        self._windows: dict[str, tuple[datetime, int]] = {}
        self._next_sweep: datetime | None = None

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    def _sweep(self, now: datetime) -> None:
        if self._next_sweep is not None and now < self._next_sweep:
            return
        expired = [
            key
            for key, (window_start, _) in self._windows.items()
            if now >= window_start + self._window
        ]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self._window

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        self._sweep(now)

        if key in self._windows:
            window_start, count = self._windows[key]
            window_end = window_start + self._window

            if now < window_end:
                if count >= self._max_requests:
                    seconds_remaining = int((window_end - now).total_seconds())
                    return RetryAfter(seconds=max(1, seconds_remaining))

                self._windows[key] = (window_start, count + 1)
                return None

        # First request, or the previous window expired
        self._windows[key] = (now, 1)
        return None


def create_rate_limiter(settings: Settings) -> RateLimiter:
    """Build the auth rate limiter: Redis-backed when configured, else in-process."""
    if settings.redis_url:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return RedisRateLimiter(client, max_requests=settings.auth_attempts_per_min)
    return InMemoryRateLimiter(max_requests=settings.auth_attempts_per_min)
