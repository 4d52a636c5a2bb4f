"""Base interface for commit diff providers."""

from __future__ import annotations

import abc
from typing import List

from ..contracts import FileChange


class DiffProvider(metaclass=abc.ABCMeta):
    """Source of the files changed between two commits."""

    #: Largest number of files a single comparison can report, if bounded.
    max_files: int | None = None

    @abc.abstractmethod
    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> List[FileChange]:
        """Return every file that differs between ``base`` and ``head``.

        Raises:
            UpstreamUnavailable: if the comparison cannot be obtained.
        """
        raise NotImplementedError
