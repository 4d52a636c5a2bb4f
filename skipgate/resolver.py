"""Turns a commit comparison into a change set."""

from __future__ import annotations

import logging
from typing import Tuple

from .contracts import ChangeSet
from .diffs import DiffProvider
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ADDED_STATUS = "added"


def split_repository(repository: str | None) -> Tuple[str, str]:
    """Split an ``owner/name`` repository identifier."""
    owner, _, name = (repository or "").partition("/")
    if not owner or not name or "/" in name:
        raise ConfigurationError(f"Invalid repository identifier: {repository!r}")
    return owner, name


class ChangeSetResolver:
    """Resolve the files changed between two commits of one repository."""

    def __init__(self, provider: DiffProvider, repository: str | None) -> None:
        self._provider = provider
        self._repository = repository

    async def resolve(self, base: str, head: str) -> ChangeSet:
        """Return the change set from ``base`` to ``head``.

        Only the ``added`` status is significant; renamed and removed files
        are reported under their current name like any modification.

        Raises:
            ConfigurationError: if the repository identifier is malformed.
            UpstreamUnavailable: if the provider fails.
        """
        owner, repo = split_repository(self._repository)
        changes = await self._provider.compare(owner, repo, base, head)

        files = {change.filename for change in changes}
        any_added = any(change.status == ADDED_STATUS for change in changes)
        limit = self._provider.max_files
        truncated = limit is not None and len(changes) >= limit
        if truncated:
            logger.warning(
                f"Comparison {base}...{head} hit the {limit} file limit; "
                "the change set may be incomplete"
            )
        return ChangeSet(files=files, any_added=any_added, truncated=truncated)
