"""
Fixed-window rate limiting on top of the limits library.

Counters live in Redis (limits' RedisStorage) or, when Redis is not
reachable at startup, in process memory (MemoryStorage). The storage
increments a counter and sets its window expiry in one operation.
"""
import logging
from enum import Enum
from typing import Dict, Tuple

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, RedisStorage, Storage
from limits.strategies import FixedWindowRateLimiter
from redis.exceptions import ConnectionError, RedisError

logger = logging.getLogger(__name__)

CREATE_SCOPE = "create"
RETRIEVE_SCOPE = "retrieve"


class RateDecision(str, Enum):
    ALLOWED = "ALLOWED"
    LIMITED = "LIMITED"
    UNAVAILABLE = "UNAVAILABLE"


def create_identity(content: str, prefix_length: int) -> str:
    """Bucket for creation requests: the leading characters of the content."""
    return content[:prefix_length]


def retrieve_identity(key: str) -> str:
    """Bucket for retrieval requests: the requested key."""
    return key


def connect_rate_limit_storage(
    url: str, socket_timeout: float, allow_fallback: bool = True
) -> Tuple[Storage, bool]:
    """
    Build the counter storage, falling back to memory.

    Args:
        url: Redis connection URL for the counters
        socket_timeout: Per-command timeout in seconds
        allow_fallback: Use MemoryStorage when Redis is unreachable

    Returns:
        Tuple of (storage, using_fallback)
    """
    storage = RedisStorage(
        url,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )
    if storage.check():
        logger.info("Rate limiter connected to Redis")
        return storage, False

    if not allow_fallback:
        raise ConnectionError(f"Rate limit storage unreachable: {url[:30]}")
    logger.warning("Rate limiter using in-memory counters. Limits are per process.")
    return MemoryStorage(), True


class RateLimiter:
    """Counts hits per (scope, identity) in fixed windows of window_seconds."""

    def __init__(
        self,
        storage: Storage,
        limits: Dict[str, int],
        window_seconds: int,
        using_fallback: bool = False,
    ):
        self.storage = storage
        self.strategy = FixedWindowRateLimiter(storage)
        self.items = {
            scope: RateLimitItemPerSecond(amount, window_seconds)
            for scope, amount in limits.items()
        }
        self.using_fallback = using_fallback

    def check(self, scope: str, identity: str) -> RateDecision:
        """
        Record a hit and decide whether it is within the scope's limit.

        Args:
            scope: Limit family, e.g. "create" or "retrieve"
            identity: Bucket key within the scope

        Returns:
            ALLOWED, LIMITED, or UNAVAILABLE when the counter storage failed
        """
        try:
            allowed = self.strategy.hit(self.items[scope], scope, identity)
        except RedisError as e:
            logger.error(f"Rate limiter unavailable for scope {scope}: {e}")
            return RateDecision.UNAVAILABLE

        if not allowed:
            logger.warning(f"Rate limit exceeded for scope {scope}")
            return RateDecision.LIMITED
        return RateDecision.ALLOWED
