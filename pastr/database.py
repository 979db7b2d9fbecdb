"""
Database layer for Redis operations with in-memory fallback for development.
Handles conditional paste inserts, lookups by key, and health checks.
"""
import json
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from redis import Redis
from redis.exceptions import RedisError

from pastr.models import Paste

logger = logging.getLogger(__name__)


class PasteStoreError(Exception):
    """Raised when the paste store cannot complete an operation."""


class InsertResult(str, Enum):
    OK = "OK"
    CONFLICT = "CONFLICT"


class InMemoryStore:
    """Simple in-memory store for development/testing (when Redis unavailable).

    Implements the subset of Redis commands used by the paste store. Every
    command holds a lock so SET NX stays atomic across request threads.
    """

    def __init__(self):
        self.store: Dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: str, nx: bool = False) -> Optional[bool]:
        """Store a string value; with nx=True only if the key is absent."""
        with self._lock:
            if nx and key in self.store:
                return None
            self.store[key] = value
            return True

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self.store.get(key)

    def ping(self):
        """Health check."""
        return True


def connect_redis(url: str, socket_timeout: float, allow_fallback: bool = True) -> Tuple[Any, bool]:
    """
    Connect to Redis, falling back to an in-memory store.

    Args:
        url: Redis connection URL (rediss:// for TLS)
        socket_timeout: Per-command timeout in seconds
        allow_fallback: Use InMemoryStore when Redis is unreachable

    Returns:
        Tuple of (client, using_fallback)
    """
    try:
        logger.info(f"Attempting to connect to Redis: {url[:30]}...")
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        client.ping()
        logger.info("Redis connected successfully")
        return client, False
    except RedisError as e:
        if not allow_fallback:
            raise
        logger.error(f"Error connecting to Redis: {type(e).__name__}: {str(e)}")
        logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
        return InMemoryStore(), True


class PasteStore:
    """Access contract over the durable key-value store.

    Pastes are written once with SET NX; nothing here updates or deletes
    an existing record.
    """

    KEY_PREFIX = "paste:"

    def __init__(self, client: Any, using_fallback: bool = False):
        self.redis = client
        self.using_fallback = using_fallback

    def _key(self, paste_id: str) -> str:
        return f"{self.KEY_PREFIX}{paste_id}"

    def is_healthy(self) -> bool:
        """Check if database connection is alive."""
        try:
            self.redis.ping()
            return True
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
        return False

    def insert(self, paste_id: str, content: str) -> InsertResult:
        """
        Persist a new paste unless the id is already taken.

        Args:
            paste_id: Candidate paste identifier
            content: Validated text content

        Returns:
            InsertResult.OK when written, InsertResult.CONFLICT if the id exists

        Raises:
            PasteStoreError: If the store is unreachable or rejects the write
        """
        record = {
            "id": paste_id,
            "content": content,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            written = self.redis.set(self._key(paste_id), json.dumps(record), nx=True)
        except RedisError as e:
            raise PasteStoreError(f"Error saving paste {paste_id}: {e}") from e

        if not written:
            logger.warning(f"Paste id {paste_id} already exists")
            return InsertResult.CONFLICT

        logger.info(f"Paste {paste_id} saved successfully")
        return InsertResult.OK

    def get_by_id(self, paste_id: str) -> Optional[Paste]:
        """
        Fetch a paste by exact key.

        Args:
            paste_id: Paste identifier

        Returns:
            The Paste, or None if no paste has this id

        Raises:
            PasteStoreError: If the store is unreachable or the record is corrupt
        """
        try:
            raw = self.redis.get(self._key(paste_id))
        except RedisError as e:
            raise PasteStoreError(f"Error fetching paste {paste_id}: {e}") from e

        if raw is None:
            logger.info(f"Paste {paste_id} not found")
            return None

        try:
            return Paste.model_validate_json(raw)
        except ValueError as e:
            raise PasteStoreError(f"Corrupt record for paste {paste_id}: {e}") from e
