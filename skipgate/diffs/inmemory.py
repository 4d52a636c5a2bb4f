"""In-memory diff provider for testing."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple, Union

from ..contracts import FileChange
from ..errors import UpstreamUnavailable
from .base import DiffProvider


class InMemoryDiffProvider(DiffProvider):
    """Serve comparisons registered with :meth:`add`."""

    def __init__(self) -> None:
        self._comparisons: Dict[Tuple[str, str], List[FileChange]] = {}
        self.calls: List[Tuple[str, str, str, str]] = []

    def add(
        self,
        base: str,
        head: str,
        changes: Iterable[Union[FileChange, Tuple[str, str]]],
    ) -> None:
        """Register the result of comparing ``base`` with ``head``.

        Changes may be given as ``(filename, status)`` pairs.
        """
        self._comparisons[(base, head)] = [
            change
            if isinstance(change, FileChange)
            else FileChange(filename=change[0], status=change[1])
            for change in changes
        ]

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> List[FileChange]:
        self.calls.append((owner, repo, base, head))
        try:
            return list(self._comparisons[(base, head)])
        except KeyError:
            raise UpstreamUnavailable(
                f"No comparison registered for {base}...{head}"
            ) from None
