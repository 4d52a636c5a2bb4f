"""Data contracts shared by the decision engine and finalize stage."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field


class RunIdentity(BaseModel):
    """Identifies one pipeline invocation."""

    workflow: Optional[str] = None
    branch: Optional[str] = None
    commit: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Return the names of absent fields, commit first."""
        return [
            name
            for name in ("commit", "branch", "workflow")
            if not getattr(self, name)
        ]

    def is_complete(self) -> bool:
        return not self.missing_fields()


class RestoreOutcome(BaseModel):
    """Result of looking up the previous footprint in the cache store."""

    found: bool = False
    matched_key: Optional[str] = None


class FileChange(BaseModel):
    """A single entry of a commit comparison."""

    filename: str
    status: str = "modified"
    previous_filename: Optional[str] = None


class ChangeSet(BaseModel):
    """Files differing between two commits."""

    files: Set[str] = Field(default_factory=set)
    any_added: bool = False
    truncated: bool = False


class DecisionState(str, Enum):
    AWAITING_IDENTITY = "awaiting_identity"
    AWAITING_RESTORE = "awaiting_restore"
    AWAITING_CHANGE_SET = "awaiting_change_set"
    DECIDED = "decided"


class Decision(BaseModel):
    """Skip/run verdict together with how it was reached.

    ``state`` is the step that produced the verdict: an early exit keeps the
    state it was in, a verdict reached after comparing the footprint is
    ``DECIDED``. ``failed`` marks an invocation without any identity at all,
    which the caller reports as a failed pipeline on top of the verdict.
    """

    skip: bool = False
    state: DecisionState = DecisionState.DECIDED
    reason: str = ""
    failed: bool = False
    matched_key: Optional[str] = None
    previous_commit: Optional[str] = None
    changed_files: Set[str] = Field(default_factory=set)

    @classmethod
    def run(cls, state: DecisionState, reason: str, **kwargs) -> "Decision":
        return cls(skip=False, state=state, reason=reason, **kwargs)

    @property
    def output_value(self) -> str:
        """Value exposed to the pipeline as the ``skip`` output."""
        return "true" if self.skip else "false"


class FinalizeResult(BaseModel):
    """Outcome of recording the current run's footprint."""

    key: Optional[str] = None
    files: List[str] = Field(default_factory=list)
    cache_id: Optional[int] = None
    registered: bool = False
