"""Record the current run's footprint for the next invocation."""

from __future__ import annotations

import asyncio
import logging

from . import footprint, keys
from .cache import DUPLICATE_CACHE_ID, CacheStore
from .contracts import FinalizeResult, RunIdentity
from .errors import IOFailure
from .footprint import FootprintStrategy, StaticFootprintStrategy

logger = logging.getLogger(__name__)


class FinalizeStage:
    """Compute, persist and register the dependency footprint.

    Failures are logged and reported through :class:`FinalizeResult`; a run
    whose footprint is not registered only causes the next invocation to run.
    """

    def __init__(
        self,
        store: CacheStore,
        strategy: FootprintStrategy | None = None,
        footprint_file: str = "filelist.txt",
        timeout: float = 30.0,
    ) -> None:
        self._store = store
        self._strategy = strategy or StaticFootprintStrategy()
        self._footprint_file = footprint_file
        self._timeout = timeout

    async def finalize(self, identity: RunIdentity) -> FinalizeResult:
        missing = identity.missing_fields()
        if missing:
            logger.error(
                f"Not recording footprint, run identity is missing: {', '.join(missing)}"
            )
            return FinalizeResult()

        key = keys.encode(identity)
        files = self._strategy.collect(self._store.workspace)
        result = FinalizeResult(key=key, files=files)

        try:
            footprint.save(self._store.workspace / self._footprint_file, files)
        except IOFailure as exc:
            logger.warning(str(exc))
            return result

        try:
            cache_id = await asyncio.wait_for(
                self._store.save([self._footprint_file], key), self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Cache save timed out after {self._timeout}s")
            return result
        except Exception as exc:
            logger.warning(f"Failed to save cache with key {key}: {exc}")
            return result

        result.cache_id = cache_id
        if cache_id == DUPLICATE_CACHE_ID:
            logger.info(f"Cache entry already exists for key: {key}")
        else:
            result.registered = True
            logger.info(f"Cache saved with key: {key}")
        return result
