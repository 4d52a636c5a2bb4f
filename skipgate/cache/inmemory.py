"""In-memory cache store for testing."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from .base import DUPLICATE_CACHE_ID, CacheStore
from .models import CacheEntry


class InMemoryCacheStore(CacheStore):
    """Keep entries in a dict; nothing survives the process."""

    def __init__(self, workspace: str | Path = ".") -> None:
        super().__init__(workspace)
        self._entries: Dict[str, CacheEntry] = {}
        self._next_id = 0

    async def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    async def latest_with_prefix(self, prefix: str) -> Optional[CacheEntry]:
        for entry in await self.list_entries():
            if entry.key.startswith(prefix):
                return entry
        return None

    async def put(self, entry: CacheEntry) -> int:
        if entry.key in self._entries:
            return DUPLICATE_CACHE_ID
        self._next_id += 1
        entry.cache_id = self._next_id
        self._entries[entry.key] = entry
        return entry.cache_id

    async def list_entries(self) -> List[CacheEntry]:
        return sorted(self._entries.values(), key=lambda e: e.cache_id, reverse=True)
