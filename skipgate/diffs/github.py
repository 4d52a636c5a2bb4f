"""GitHub REST API diff provider."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote

import requests

from ..contracts import FileChange
from ..errors import UpstreamUnavailable
from .base import DiffProvider

logger = logging.getLogger(__name__)

# https://docs.github.com/en/rest/commits/commits#compare-two-commits
COMPARE_FILES_LIMIT = 300


class GitHubDiffProvider(DiffProvider):
    """Compare two commits with ``GET /repos/{owner}/{repo}/compare``."""

    max_files = COMPARE_FILES_LIMIT

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _compare(self, owner: str, repo: str, base: str, head: str) -> List[FileChange]:
        url = (
            f"{self.api_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
            f"/compare/{quote(base, safe='')}...{quote(head, safe='')}"
        )
        try:
            resp = requests.get(url, headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise UpstreamUnavailable(
                f"Failed to compare {base}...{head} in {owner}/{repo}: {exc}"
            ) from exc
        except ValueError as exc:
            raise UpstreamUnavailable(
                f"Invalid comparison response for {base}...{head}: {exc}"
            ) from exc

        changes = []
        for item in data.get("files") or []:
            changes.append(
                FileChange(
                    filename=item["filename"],
                    status=item.get("status", "modified"),
                    previous_filename=item.get("previous_filename"),
                )
            )
        logger.debug(f"Comparison {base}...{head} reported {len(changes)} files")
        return changes

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> List[FileChange]:
        return await asyncio.to_thread(self._compare, owner, repo, base, head)
