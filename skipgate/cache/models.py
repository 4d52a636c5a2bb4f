"""Data models for cached entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Files saved under one cache key."""

    key: str
    files: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    cache_id: int = 0
