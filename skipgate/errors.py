"""Error taxonomy for skip decisions and finalization."""

from __future__ import annotations


class SkipGateError(Exception):
    """Base class for all skipgate failures."""


class ConfigurationError(SkipGateError):
    """Raised when configuration or backend selection is invalid."""


class MissingIdentity(SkipGateError):
    """Raised when workflow, branch or commit is not available."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing run identity fields: {', '.join(missing)}")


class CacheMiss(SkipGateError):
    """Raised when no cached footprint matches the lookup keys."""


class MalformedCacheKey(SkipGateError):
    """Raised when a cache key cannot be decoded into a commit."""


class UpstreamUnavailable(SkipGateError):
    """Raised when the commit diff provider cannot answer."""


class IOFailure(SkipGateError):
    """Raised when the footprint file cannot be read or written."""
