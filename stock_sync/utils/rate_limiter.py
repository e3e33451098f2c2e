"""
KeyCRM API Rate Limiter using a Fixed Window counter.

KeyCRM allows 60 requests per minute. The limiter keeps a window start time
and a request count; when the window has elapsed the count resets.

Window Configuration:
- Limit: 60 requests
- Window: 60 seconds
- Storage: process memory (RateLimiter) or Redis (RedisRateLimiter)

Consulting the limiter does not count a request. The caller records the
request once the page has been fetched successfully:

    limiter = get_keycrm_rate_limiter()
    if not limiter.can_make_request():
        raise RateLimitError()
    ...  # call KeyCRM
    limiter.record_request()

Fixed windows allow a burst of up to 2x the limit around a window boundary.
"""

import logging
import time
from typing import Callable, Optional

import redis

from stock_sync.core.config import settings
from stock_sync.core.constants.sync import RATE_WINDOW_KEY

logger = logging.getLogger("rate_limiter")

DEFAULT_LIMIT = 60             # Requests per window
DEFAULT_WINDOW_SECONDS = 60    # Window length

# Lua script for atomic window check
# Reads, resets an elapsed window and compares against the limit in one step,
# so concurrent workers never both reset the window
CHECK_WINDOW_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])
local ttl = tonumber(ARGV[4])

local window_start = tonumber(redis.call('HGET', key, 'window_start') or 0)
local request_count = tonumber(redis.call('HGET', key, 'request_count') or 0)

if now - window_start >= window then
    redis.call('HSET', key, 'window_start', ARGV[1], 'request_count', 0)
    redis.call('EXPIRE', key, ttl)
    return {1, ARGV[1], 0}
end

-- window_start goes back as a string; Lua numbers are truncated to integers
if request_count < limit then
    return {1, tostring(window_start), request_count}
end
return {0, tostring(window_start), request_count}
"""


class RateLimiter:
    """
    In-process fixed window limiter.

    State lives for the lifetime of the object. In a short-lived process
    the budget is only enforced within one run; use RedisRateLimiter to
    share the window across processes.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the rate limiter.

        Args:
            limit: Maximum requests allowed per window
            window_seconds: Window length in seconds
            clock: Returns the current time in seconds (injectable for tests)
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self.window_start: float = 0.0
        self.request_count: int = 0

    def can_make_request(self) -> bool:
        """
        Check whether one more request fits in the current window.

        Resets the window as a side effect when it has elapsed.
        """
        now = self._clock()
        if now - self.window_start >= self.window_seconds:
            self.request_count = 0
            self.window_start = now
            return True

        if self.request_count >= self.limit:
            logger.debug(
                f"Window exhausted: {self.request_count}/{self.limit} "
                f"since {self.window_start:.0f}"
            )
            return False

        return True

    def record_request(self) -> None:
        """Count one completed request against the current window."""
        self.request_count += 1

    def get_status(self) -> dict:
        """Current window state (for monitoring)."""
        return {
            "backend": "memory",
            "window_start": self.window_start,
            "request_count": self.request_count,
            "limit": self.limit,
            "window_seconds": self.window_seconds,
        }


class RedisRateLimiter(RateLimiter):
    """
    Fixed window limiter whose window is shared through Redis.

    Lets the 60 requests/minute budget hold across Celery workers and
    across runs. On Redis errors the request is allowed (fail-open) so a
    Redis outage does not stop stock sync.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
        key: str = RATE_WINDOW_KEY,
    ):
        super().__init__(limit=limit, window_seconds=window_seconds, clock=clock)
        self._redis = redis_client
        self._key = key
        self._check_script = self._redis.register_script(CHECK_WINDOW_SCRIPT)

        logger.info(
            f"RedisRateLimiter initialized: limit={limit}/{window_seconds}s key={key}"
        )

    def _load(self) -> None:
        state = self._redis.hgetall(self._key) or {}
        self.window_start = float(state.get("window_start") or 0)
        self.request_count = int(state.get("request_count") or 0)

    def can_make_request(self) -> bool:
        try:
            allowed, window_start, request_count = self._check_script(
                keys=[self._key],
                args=[self._clock(), self.window_seconds, self.limit, self.window_seconds * 2],
            )
        except redis.RedisError as e:
            logger.error(f"Redis error in can_make_request: {e}")
            return True
        self.window_start = float(window_start)
        self.request_count = int(request_count)
        return bool(int(allowed))

    def record_request(self) -> None:
        try:
            self.request_count = int(self._redis.hincrby(self._key, "request_count", 1))
        except redis.RedisError as e:
            logger.error(f"Redis error in record_request: {e}")

    def get_status(self) -> dict:
        try:
            self._load()
        except redis.RedisError as e:
            logger.error(f"Redis error in get_status: {e}")
            return {"error": str(e)}
        status = super().get_status()
        status["backend"] = "redis"
        return status


# Singleton instance
_rate_limiter: Optional[RateLimiter] = None


def get_keycrm_rate_limiter() -> RateLimiter:
    """
    Get or create the process-wide KeyCRM rate limiter.

    RATE_LIMIT_BACKEND selects "memory" (default) or "redis".
    """
    global _rate_limiter

    if _rate_limiter is None:
        limit = settings.keycrm_rate_limit_requests
        window = settings.keycrm_rate_limit_window_seconds

        if settings.rate_limit_backend.lower() == "redis":
            _rate_limiter = RedisRateLimiter(
                redis_client=redis.Redis.from_url(settings.redis_url, decode_responses=True),
                limit=limit,
                window_seconds=window,
            )
        else:
            _rate_limiter = RateLimiter(limit=limit, window_seconds=window)

    return _rate_limiter


def reset_rate_limiter() -> None:
    """Reset the singleton instance (for testing)."""
    global _rate_limiter
    _rate_limiter = None
