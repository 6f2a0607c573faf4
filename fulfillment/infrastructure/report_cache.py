import json
import logging
import time
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

KEY_PREFIX = "fulfillment:report:"


class ReportCache:
    """TTL cache for dashboard reports.

    Redis is the primary store when a client is supplied; entries also live
    in RAM so a redis outage only costs freshness, never correctness. The
    clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        ttl: int = 60,
        redis_client: Optional["redis.Redis"] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.redis = redis_client
        self.redis_available = redis_client is not None
        self.clock = clock
        self._memory_store: dict[str, tuple[float, Any]] = {}

    @classmethod
    def from_url(cls, url: Optional[str], ttl: int = 60) -> "ReportCache":
        if not url:
            logger.info("ReportCache: no REDIS_URL, using RAM store.")
            return cls(ttl=ttl)
        try:
            client = redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=1  # Fail fast if Redis is down
            )
            client.ping()
            logger.info("✅ ReportCache: Connected to Redis.")
            return cls(ttl=ttl, redis_client=client)
        except (RedisError, OSError) as e:
            logger.warning(f"⚠️ ReportCache: Redis unreachable ({e}). Using RAM fallback.")
            return cls(ttl=ttl)

    def get(self, key: str) -> Optional[Any]:
        if self.redis_available:
            try:
                data = self.redis.get(KEY_PREFIX + key)
                if data is not None:
                    return json.loads(data)
            except RedisError as e:
                self._handle_redis_error(e)

        entry = self._memory_store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() >= expires_at:
            self._memory_store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        """``value`` must be JSON serializable."""
        if self.redis_available:
            try:
                self.redis.setex(KEY_PREFIX + key, self.ttl, json.dumps(value))
            except RedisError as e:
                self._handle_redis_error(e)

        # Always write to RAM too
        self._memory_store[key] = (self.clock() + self.ttl, value)

    def invalidate(self, key: str) -> None:
        if self.redis_available:
            try:
                self.redis.delete(KEY_PREFIX + key)
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store.pop(key, None)

    def clear(self) -> None:
        if self.redis_available:
            try:
                keys = list(self.redis.scan_iter(match=KEY_PREFIX + "*"))
                if keys:
                    self.redis.delete(*keys)
            except RedisError as e:
                self._handle_redis_error(e)
        self._memory_store.clear()

    def size(self) -> int:
        now = self.clock()
        return sum(1 for expires_at, _ in self._memory_store.values() if expires_at > now)

    def _handle_redis_error(self, e):
        """Log error and stop trying Redis; RAM keeps serving."""
        logger.error(f"❌ Redis Error: {e}. Switching to RAM mode.")
        self.redis_available = False
