"""
Run lock — Redis-based mutex that keeps stock sync runs from overlapping.

Two overlapping runs would write the same SKUs harmlessly (last write wins)
but would double the load on the rate-limited KeyCRM API. Both the HTTP
trigger and the Celery beat task take this lock before running.
Version: 1.0.0
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

import redis

from stock_sync.core.config import settings
from stock_sync.core.constants.sync import SYNC_LOCK_KEY
from stock_sync.core.exceptions import SyncInProgressError

logger = logging.getLogger(__name__)

# Only delete the key if we still own it
_RELEASE_SCRIPT = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


def _get_redis() -> redis.Redis:
    """Create a Redis client from the configured URL."""
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


def acquire_sync_lock(owner: str, ttl: Optional[int] = None, client: Optional[redis.Redis] = None) -> bool:
    """Acquire the stock sync lock (SET NX EX).

    Returns True if lock was acquired (this run should proceed).
    Returns False if lock is already held (another run is in progress).
    """
    r = client or _get_redis()
    ttl = ttl or settings.sync_lock_ttl_seconds

    acquired = r.set(SYNC_LOCK_KEY, owner, nx=True, ex=ttl)

    if acquired:
        logger.info(f"Sync lock ACQUIRED: owner={owner}, ttl={ttl}s")
    else:
        holder = r.get(SYNC_LOCK_KEY)
        logger.info(f"Sync lock HELD: holder={holder}, skipping")

    return bool(acquired)


def release_sync_lock(owner: str, client: Optional[redis.Redis] = None) -> None:
    """Release the stock sync lock if ``owner`` still holds it."""
    r = client or _get_redis()
    r.eval(_RELEASE_SCRIPT, 1, SYNC_LOCK_KEY, owner)
    logger.debug(f"Sync lock released: owner={owner}")


@contextmanager
def sync_run_lock(owner: Optional[str] = None) -> Iterator[str]:
    """
    Hold the stock sync lock for the duration of the block.

    Raises SyncInProgressError when another run holds it. A no-op when
    SYNC_LOCK_ENABLED is false.
    """
    owner = owner or uuid.uuid4().hex
    if not settings.sync_lock_enabled:
        yield owner
        return

    client = _get_redis()
    if not acquire_sync_lock(owner, client=client):
        raise SyncInProgressError("Synchronization already in progress")
    try:
        yield owner
    finally:
        try:
            release_sync_lock(owner, client=client)
        except redis.RedisError as e:
            # Lock expires on its own after the TTL
            logger.warning(f"Failed to release sync lock: {e}")
