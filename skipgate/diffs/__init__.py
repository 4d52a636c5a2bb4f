"""Diff provider factory and initialization."""

from __future__ import annotations

from typing import Optional

from ..config import SkipGateConfig, load_config
from ..errors import ConfigurationError
from .base import DiffProvider
from .inmemory import InMemoryDiffProvider


def get_diff_provider(
    backend: Optional[str] = None,
    config: Optional[SkipGateConfig] = None,
    token: Optional[str] = None,
    api_url: Optional[str] = None,
) -> DiffProvider:
    """Factory function to get the configured diff provider."""

    config = config or load_config()
    backend = (backend or config.diff.backend).lower()

    if backend == "inmemory":
        return InMemoryDiffProvider()
    elif backend == "github":
        from .github import GitHubDiffProvider

        return GitHubDiffProvider(
            token=token,
            api_url=api_url or config.diff.api_url,
            timeout=config.timeout,
        )
    else:
        raise ConfigurationError(f"Unsupported diff backend: {backend}")


__all__ = ["DiffProvider", "InMemoryDiffProvider", "get_diff_provider"]
