"""Persistence and computation of a run's dependency footprint.

The footprint is the set of files a run depended on. It is stored as a
newline-delimited text file which the cache store carries from one run to
the next.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence, Set

from .config import DEFAULT_FOOTPRINT_CANDIDATES, SkipGateConfig
from .errors import ConfigurationError, IOFailure

logger = logging.getLogger(__name__)


def load(path: str | Path) -> Set[str]:
    """Read a footprint file.

    A trailing newline leaves an empty string in the result. It never
    matches a changed file, so it is kept rather than filtered.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise IOFailure(f"Failed to read footprint {path}: {exc}") from exc
    return set(content.split("\n"))


def save(path: str | Path, files: Iterable[str]) -> None:
    """Write one path per line, replacing any existing footprint."""
    content = "".join(f"{name}\n" for name in files)
    try:
        Path(path).write_text(content, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise IOFailure(f"Failed to write footprint {path}: {exc}") from exc


class FootprintStrategy(Protocol):
    """Computes which files the current run depended on."""

    def collect(self, workspace: Path) -> List[str]:
        """Return workspace-relative paths of the files used by the run."""


class StaticFootprintStrategy:
    """Report a fixed list of well-known files that exist in the workspace.

    Stands in until dependency tracing is available.
    """

    def __init__(self, candidates: Sequence[str] = DEFAULT_FOOTPRINT_CANDIDATES) -> None:
        self.candidates = list(candidates)

    def collect(self, workspace: Path) -> List[str]:
        found = [name for name in self.candidates if (workspace / name).exists()]
        logger.debug(f"Static footprint found {len(found)} of {len(self.candidates)} files")
        return found


def get_footprint_strategy(config: SkipGateConfig) -> FootprintStrategy:
    """Factory function to get the configured footprint strategy."""

    strategy = config.footprint.strategy.lower()
    if strategy == "static":
        return StaticFootprintStrategy(config.footprint.candidates)
    raise ConfigurationError(f"Unsupported footprint strategy: {strategy}")
