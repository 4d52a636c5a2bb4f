"""Redis cache store for sharing footprints between runners."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import redis.asyncio as redis
from pydantic import ValidationError

from .base import DUPLICATE_CACHE_ID, CacheStore
from .models import CacheEntry

logger = logging.getLogger(__name__)


class RedisCacheStore(CacheStore):
    """Redis-based cache store.

    Entries are JSON strings written with ``SET NX`` and expire after
    ``ttl`` seconds; a sorted set scored by a monotonically increasing id
    orders keys for prefix lookups and keeps at most ``max_entries`` keys.
    Index members whose entry has expired are dropped when encountered.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        namespace: str = "skipgate",
        ttl: Optional[int] = 7 * 24 * 3600,
        max_entries: int = 1000,
        workspace: str = ".",
        client: Optional[Any] = None,
    ) -> None:
        super().__init__(workspace)
        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.namespace = namespace
        self.ttl = ttl
        self.max_entries = max_entries
        self._redis: Optional[Any] = client

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = redis.Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            password=self.password,
            decode_responses=True,
        )
        await self._redis.ping()

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def _client(self) -> Any:
        if not self._redis:
            await self.connect()
        return self._redis

    def _entry_key(self, key: str) -> str:
        return f"{self.namespace}:entry:{key}"

    @property
    def _index_key(self) -> str:
        return f"{self.namespace}:index"

    @property
    def _counter_key(self) -> str:
        return f"{self.namespace}:ids"

    async def _prune(self, client: Any, key: str) -> None:
        await client.zrem(self._index_key, key)

    async def get(self, key: str) -> Optional[CacheEntry]:
        client = await self._client()
        raw = await client.get(self._entry_key(key))
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable cache entry {key}: {exc}")
            return None

    async def latest_with_prefix(self, prefix: str) -> Optional[CacheEntry]:
        client = await self._client()
        for key in await client.zrevrange(self._index_key, 0, -1):
            if not key.startswith(prefix):
                continue
            entry = await self.get(key)
            if entry is not None:
                return entry
            await self._prune(client, key)
        return None

    async def put(self, entry: CacheEntry) -> int:
        client = await self._client()
        entry.cache_id = int(await client.incr(self._counter_key))
        stored = await client.set(
            self._entry_key(entry.key), entry.model_dump_json(), nx=True, ex=self.ttl
        )
        if not stored:
            return DUPLICATE_CACHE_ID
        await client.zadd(self._index_key, {entry.key: entry.cache_id})
        await client.zremrangebyrank(self._index_key, 0, -self.max_entries - 1)
        return entry.cache_id

    async def list_entries(self) -> List[CacheEntry]:
        client = await self._client()
        entries = []
        for key in await client.zrevrange(self._index_key, 0, -1):
            entry = await self.get(key)
            if entry is None:
                await self._prune(client, key)
                continue
            entries.append(entry)
        return entries
