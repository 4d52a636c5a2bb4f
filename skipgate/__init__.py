"""skipgate: skip CI work when none of its dependencies changed."""

from .cache import CacheStore, get_cache_store
from .config import RunEnvironment, SkipGateConfig, load_config
from .contracts import ChangeSet, Decision, DecisionState, FinalizeResult, RunIdentity
from .diffs import DiffProvider, get_diff_provider
from .engine import SkipDecisionEngine
from .finalize import FinalizeStage
from .resolver import ChangeSetResolver

__version__ = "0.1.0"
__all__ = [
    "CacheStore",
    "ChangeSet",
    "ChangeSetResolver",
    "Decision",
    "DecisionState",
    "DiffProvider",
    "FinalizeResult",
    "FinalizeStage",
    "RunEnvironment",
    "RunIdentity",
    "SkipDecisionEngine",
    "SkipGateConfig",
    "get_cache_store",
    "get_diff_provider",
    "load_config",
]
