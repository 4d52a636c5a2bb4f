from __future__ import annotations

import os
from typing import List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from .contracts import RunIdentity

DEFAULT_FOOTPRINT_CANDIDATES = ["main.rb", "Gemfile", "Gemfile.lock"]


class RedisConfig(BaseModel):
    """Configuration for the Redis cache store."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    namespace: str = "skipgate"
    ttl: Optional[int] = 7 * 24 * 3600
    max_entries: int = 1000


class CacheConfig(BaseModel):
    """Cache store configuration settings."""

    backend: Literal["local", "inmemory", "redis"] = "local"
    directory: str = ".skipgate/cache"
    redis: RedisConfig = RedisConfig()


class DiffConfig(BaseModel):
    """Commit diff provider settings."""

    backend: Literal["github", "inmemory"] = "github"
    api_url: str = "https://api.github.com"


class FootprintConfig(BaseModel):
    """Where the footprint is written and how it is computed."""

    path: str = "filelist.txt"
    strategy: Literal["static"] = "static"
    candidates: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FOOTPRINT_CANDIDATES)
    )


class SkipGateConfig(BaseModel):
    """Top-level configuration model."""

    cache: CacheConfig = CacheConfig()
    diff: DiffConfig = DiffConfig()
    footprint: FootprintConfig = FootprintConfig()
    timeout: float = 30.0
    workspace: str = "."


def load_config(path: Optional[str] = None) -> SkipGateConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to SKIPGATE_CONFIG env
            variable or 'skipgate.yaml' in the current directory.
    """

    config_path = path or os.getenv("SKIPGATE_CONFIG", "skipgate.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = SkipGateConfig(**data)
    else:
        config = SkipGateConfig()

    env_cache_backend = os.getenv("SKIPGATE_CACHE_BACKEND")
    if env_cache_backend:
        config.cache.backend = env_cache_backend.lower()
    env_diff_backend = os.getenv("SKIPGATE_DIFF_BACKEND")
    if env_diff_backend:
        config.diff.backend = env_diff_backend.lower()
    env_timeout = os.getenv("SKIPGATE_TIMEOUT")
    if env_timeout:
        config.timeout = float(env_timeout)
    return config


class RunEnvironment(BaseModel):
    """Values the CI runner exposes for the current invocation.

    Read once at the entry point; the engine only ever sees the derived
    :class:`RunIdentity` and explicit settings.
    """

    commit: Optional[str] = None
    branch: Optional[str] = None
    workflow: Optional[str] = None
    repository: Optional[str] = None
    token: Optional[str] = None
    output_path: Optional[str] = None
    api_url: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunEnvironment":
        env = os.environ if environ is None else environ
        return cls(
            commit=env.get("GITHUB_SHA") or None,
            branch=env.get("GITHUB_REF") or None,
            workflow=env.get("GITHUB_WORKFLOW") or None,
            repository=env.get("GITHUB_REPOSITORY") or None,
            token=env.get("GITHUB_TOKEN") or None,
            output_path=env.get("GITHUB_OUTPUT") or None,
            api_url=env.get("GITHUB_API_URL") or None,
        )

    def identity(self) -> RunIdentity:
        return RunIdentity(
            workflow=self.workflow, branch=self.branch, commit=self.commit
        )
