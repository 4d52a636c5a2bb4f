"""Directory-backed cache store.

Each entry is one JSON document named after its quoted key, so a cache
directory can be carried between runs by any artifact mechanism.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from .base import DUPLICATE_CACHE_ID, CacheStore
from .models import CacheEntry

logger = logging.getLogger(__name__)


class LocalCacheStore(CacheStore):
    """Persist cache entries as JSON files under ``directory``."""

    def __init__(self, directory: str | Path, workspace: str | Path = ".") -> None:
        super().__init__(workspace)
        self.directory = Path(directory).expanduser()

    # ------------------------------------------------------------------
    # Helper methods
    def _entry_path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def _read(self, path: Path) -> Optional[CacheEntry]:
        try:
            return CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValidationError) as exc:
            logger.warning(f"Ignoring unreadable cache entry {path.name}: {exc}")
            return None

    def _read_all(self) -> List[CacheEntry]:
        if not self.directory.is_dir():
            return []
        entries = [self._read(path) for path in self.directory.glob("*.json")]
        return sorted(
            (entry for entry in entries if entry is not None),
            key=lambda e: (e.cache_id, e.created_at),
            reverse=True,
        )

    def _write_new(self, entry: CacheEntry) -> int:
        self.directory.mkdir(parents=True, exist_ok=True)
        existing = self._read_all()
        entry.cache_id = (existing[0].cache_id if existing else 0) + 1
        try:
            with open(self._entry_path(entry.key), "x", encoding="utf-8") as f:
                f.write(entry.model_dump_json(indent=2))
        except FileExistsError:
            return DUPLICATE_CACHE_ID
        return entry.cache_id

    # ------------------------------------------------------------------
    # Store API
    async def get(self, key: str) -> Optional[CacheEntry]:
        return await asyncio.to_thread(self._read, self._entry_path(key))

    async def latest_with_prefix(self, prefix: str) -> Optional[CacheEntry]:
        for entry in await self.list_entries():
            if entry.key.startswith(prefix):
                return entry
        return None

    async def put(self, entry: CacheEntry) -> int:
        return await asyncio.to_thread(self._write_new, entry)

    async def list_entries(self) -> List[CacheEntry]:
        return await asyncio.to_thread(self._read_all)
