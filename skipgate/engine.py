"""Skip decision engine.

Decides whether the expensive part of a pipeline can be skipped by checking
the files changed since the previous successful run against the files that
run depended on. Every step is a guard: as soon as one cannot establish that
skipping is safe, the engine returns a run verdict.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Set

from . import footprint, keys
from .cache import CacheStore
from .contracts import ChangeSet, Decision, DecisionState, RestoreOutcome, RunIdentity
from .errors import ConfigurationError, IOFailure, SkipGateError, UpstreamUnavailable
from .resolver import ChangeSetResolver

logger = logging.getLogger(__name__)


class SkipDecisionEngine:
    """Produce a skip/run verdict for one pipeline invocation."""

    def __init__(
        self,
        store: CacheStore,
        resolver: ChangeSetResolver,
        footprint_file: str = "filelist.txt",
        timeout: float = 30.0,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._footprint_file = footprint_file
        self._timeout = timeout

    @property
    def footprint_path(self) -> Path:
        return self._store.workspace / self._footprint_file

    async def decide(self, identity: RunIdentity) -> Decision:
        """Run the decision chain; never raises for skipgate errors."""
        try:
            decision = await self._decide(identity)
        except SkipGateError as exc:
            logger.error(f"Cannot decide whether to skip: {exc}")
            decision = Decision.run(DecisionState.DECIDED, str(exc))
        logger.debug(f"Decision: skip={decision.skip} ({decision.reason})")
        return decision

    async def _decide(self, identity: RunIdentity) -> Decision:
        decision = self.check_identity(identity)
        if decision is not None:
            return decision

        outcome = await self.restore(identity)
        if not outcome.found:
            return Decision.run(
                DecisionState.AWAITING_RESTORE, "No cached footprint for this branch"
            )

        previous_commit = keys.decode_commit(outcome.matched_key)
        if previous_commit is None:
            return Decision.run(
                DecisionState.AWAITING_RESTORE,
                f"Malformed cache key: {outcome.matched_key}",
                matched_key=outcome.matched_key,
            )

        context = {"matched_key": outcome.matched_key, "previous_commit": previous_commit}
        change_set = await self.resolve_changes(previous_commit, identity.commit)
        if change_set is None:
            return Decision.run(
                DecisionState.AWAITING_CHANGE_SET,
                "Changed files could not be determined",
                **context,
            )
        context["changed_files"] = change_set.files
        if change_set.any_added:
            return Decision.run(
                DecisionState.AWAITING_CHANGE_SET, "Files were added", **context
            )
        if change_set.truncated:
            return Decision.run(
                DecisionState.AWAITING_CHANGE_SET,
                "Change set is incomplete",
                **context,
            )

        try:
            used_files = footprint.load(self.footprint_path)
        except IOFailure as exc:
            logger.warning(str(exc))
            return Decision.run(
                DecisionState.AWAITING_CHANGE_SET,
                "Previous footprint could not be read",
                **context,
            )
        return self.compare(change_set, used_files, **context)

    # ------------------------------------------------------------------
    # Steps
    def check_identity(self, identity: RunIdentity) -> Optional[Decision]:
        """Return a run decision if any identity field is missing."""
        missing = identity.missing_fields()
        if not missing:
            return None
        for name in missing:
            logger.error(f"Run identity field '{name}' is not defined")
        return Decision.run(
            DecisionState.AWAITING_IDENTITY,
            f"Missing run identity: {', '.join(missing)}",
            failed=len(missing) == len(RunIdentity.model_fields),
        )

    async def restore(self, identity: RunIdentity) -> RestoreOutcome:
        """Restore the newest footprint saved for this workflow and branch."""
        primary_key = keys.encode(identity)
        restore_keys = [keys.encode_prefix(identity.workflow, identity.branch)]
        # only a footprint written by this restore may be compared
        try:
            self.footprint_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(f"Cannot remove stale footprint {self.footprint_path}: {exc}")
            return RestoreOutcome()
        try:
            matched_key = await asyncio.wait_for(
                self._store.restore([self._footprint_file], primary_key, restore_keys),
                self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Cache restore timed out after {self._timeout}s")
            return RestoreOutcome()
        except Exception as exc:
            logger.warning(f"Cache restore failed: {exc}")
            return RestoreOutcome()

        if not matched_key:
            logger.info(
                "Cache not found for input keys: "
                + ", ".join([primary_key, *restore_keys])
            )
            return RestoreOutcome()
        logger.info(f"Cache restored with key: {matched_key}")
        return RestoreOutcome(found=True, matched_key=matched_key)

    async def resolve_changes(self, base: str, head: str) -> Optional[ChangeSet]:
        """Return the change set, or ``None`` if it cannot be obtained."""
        try:
            return await asyncio.wait_for(
                self._resolver.resolve(base, head), self._timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"Comparing {base}...{head} timed out after {self._timeout}s")
        except (UpstreamUnavailable, ConfigurationError) as exc:
            logger.error(str(exc))
        return None

    def compare(
        self, change_set: ChangeSet, used_files: Set[str], **context
    ) -> Decision:
        """Skip only if no changed file is part of the footprint."""
        for name in sorted(change_set.files):
            if name in used_files:
                return Decision.run(
                    DecisionState.DECIDED,
                    f"Dependency changed: {name}",
                    **context,
                )
        return Decision(
            skip=True,
            state=DecisionState.DECIDED,
            reason="No dependency changed",
            **context,
        )
