"""
Redis-backed tag cache for production when REDIS_URL is set. Implements the
same interface as storefront.database.cache (in-memory stub).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

import redis

logger = logging.getLogger(__name__)


class TagCache:
    """
    Values are stored JSON-encoded under ``cache:<key>``; tag membership is
    kept in the Redis set ``cache-tag:<tag>``.
    """

    def __init__(self, url: str, default_ttl: int = 86400, client: Optional[redis.Redis] = None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    @staticmethod
    def _key(key: str) -> str:
        return f"cache:{key}"

    @staticmethod
    def _tag_key(tag: str) -> str:
        return f"cache-tag:{tag}"

    def get(self, key: str) -> Optional[Any]:
        raw = self._client.get(self._key(key))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def set(self, key: str, value: Any, tags: Iterable[str] = (), ttl: Optional[int] = None) -> None:
        ttl = ttl or self._default_ttl
        pipe = self._client.pipeline()
        pipe.setex(self._key(key), ttl, json.dumps(value, default=str))
        for tag in tags:
            pipe.sadd(self._tag_key(tag), key)
            pipe.expire(self._tag_key(tag), ttl)
        pipe.execute()

    def invalidate_tag(self, tag: str) -> int:
        keys = self._client.smembers(self._tag_key(tag))
        removed = 0
        if keys:
            removed = self._client.delete(*[self._key(k) for k in keys])
        self._client.delete(self._tag_key(tag))
        logger.info("Invalidated cache tag %s (%d entries)", tag, removed)
        return removed

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
