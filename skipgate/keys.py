"""Composite ``workflow-branch-commit`` cache keys."""

from __future__ import annotations

import logging
from typing import Optional

from .contracts import RunIdentity
from .errors import MissingIdentity

logger = logging.getLogger(__name__)

SEPARATOR = "-"


def encode(identity: RunIdentity) -> str:
    """Build the cache key for ``identity``."""
    missing = identity.missing_fields()
    if missing:
        raise MissingIdentity(missing)
    return f"{identity.workflow}{SEPARATOR}{identity.branch}{SEPARATOR}{identity.commit}"


def encode_prefix(workflow: str, branch: str) -> str:
    """Prefix matching every key saved for the same workflow and branch."""
    return f"{workflow}{SEPARATOR}{branch}{SEPARATOR}"


def decode_commit(key: str) -> Optional[str]:
    """Return the commit encoded in ``key``.

    Branch names may contain the separator, so only the last one counts.
    Returns ``None`` for keys that were not produced by :func:`encode`.
    """
    _, sep, commit = key.rpartition(SEPARATOR)
    if not sep or not commit:
        logger.warning(f"Malformed cache key: {key}")
        return None
    return commit
