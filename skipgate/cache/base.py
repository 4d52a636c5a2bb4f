"""Base cache store interface."""

from __future__ import annotations

import abc
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..errors import IOFailure
from .models import CacheEntry

logger = logging.getLogger(__name__)

DUPLICATE_CACHE_ID = -1


class CacheStore(metaclass=abc.ABCMeta):
    """Key addressed store for the files a run leaves behind.

    Entries are immutable: saving an existing key is refused with
    ``DUPLICATE_CACHE_ID``. Restoring tries the exact key first and then,
    for each restore key in order, the newest entry whose key starts with it.
    Paths are resolved relative to ``workspace``.
    """

    def __init__(self, workspace: str | Path = ".") -> None:
        self.workspace = Path(workspace)

    async def connect(self) -> None:
        """Open connection to the backend (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close connection to the backend (no-op by default)."""
        pass

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry saved under exactly ``key``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def latest_with_prefix(self, prefix: str) -> Optional[CacheEntry]:
        """Return the most recently saved entry whose key starts with ``prefix``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def put(self, entry: CacheEntry) -> int:
        """Store ``entry`` unless its key exists; return its id or -1."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_entries(self) -> List[CacheEntry]:
        """Return all entries, newest first."""
        raise NotImplementedError

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Iterable[str] = (),
    ) -> Optional[str]:
        """Restore ``paths`` into the workspace.

        An entry that lacks any of ``paths`` counts as a miss.

        Returns:
            The key of the entry that was restored, or ``None`` on a miss.
        """
        entry = await self.get(primary_key)
        if entry is None:
            for prefix in restore_keys:
                entry = await self.latest_with_prefix(prefix)
                if entry is not None:
                    break
        if entry is None:
            return None

        missing = [path for path in paths if path not in entry.files]
        if missing:
            logger.warning(
                f"Cache entry {entry.key} has no {', '.join(missing)}, treating as a miss"
            )
            return None

        for path in paths:
            target = self.workspace / path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(entry.files[path], encoding="utf-8")
            except OSError as exc:
                raise IOFailure(f"Failed to restore {path}: {exc}") from exc
        return entry.key

    async def save(self, paths: Sequence[str], key: str) -> int:
        """Save ``paths`` from the workspace under ``key``.

        Returns:
            The new entry id, or ``DUPLICATE_CACHE_ID`` if ``key`` is taken.
        """
        files: Dict[str, str] = {}
        for path in paths:
            source = self.workspace / path
            if not source.exists():
                logger.warning(f"Path does not exist, not caching: {path}")
                continue
            try:
                files[path] = source.read_text(encoding="utf-8")
            except OSError as exc:
                raise IOFailure(f"Failed to read {path}: {exc}") from exc
        if not files:
            raise IOFailure(
                f"None of the paths to cache exist: {', '.join(paths)}"
            )
        return await self.put(CacheEntry(key=key, files=files))
