"""Command line interface for skip decisions in CI pipelines."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from skipgate.cache import CacheStore, get_cache_store
from skipgate.cli_utils.annotations import _actions_logging
from skipgate.cli_utils.outputs import _set_output
from skipgate.config import RunEnvironment, SkipGateConfig, load_config
from skipgate.contracts import Decision, FinalizeResult, RunIdentity
from skipgate.diffs import get_diff_provider
from skipgate.engine import SkipDecisionEngine
from skipgate.finalize import FinalizeStage
from skipgate.footprint import get_footprint_strategy
from skipgate.resolver import ChangeSetResolver

logger = logging.getLogger(__name__)

app = typer.Typer(help="Skip CI work when none of its dependencies changed")

cache_app = typer.Typer(help="Commands for inspecting the footprint cache")

app.add_typer(cache_app, name="cache")


@app.callback()
def main() -> None:
    """skipgate CLI entry point."""
    pass


def _load(config_path: Optional[Path]) -> SkipGateConfig:
    return load_config(str(config_path) if config_path else None)


def _build_engine(
    config: SkipGateConfig, env: RunEnvironment, store: CacheStore
) -> SkipDecisionEngine:
    provider = get_diff_provider(config=config, token=env.token, api_url=env.api_url)
    return SkipDecisionEngine(
        store,
        ChangeSetResolver(provider, env.repository),
        footprint_file=config.footprint.path,
        timeout=config.timeout,
    )


async def _decide(
    engine: SkipDecisionEngine, store: CacheStore, identity: RunIdentity
) -> Decision:
    try:
        return await engine.decide(identity)
    finally:
        await store.disconnect()


async def _finalize(
    stage: FinalizeStage, store: CacheStore, identity: RunIdentity
) -> FinalizeResult:
    try:
        return await stage.finalize(identity)
    finally:
        await store.disconnect()


def _emit_skip(value: str, env: RunEnvironment) -> None:
    if not _set_output("skip", value, env.output_path):
        typer.echo(f"skip={value}")


@app.command("decide")
def decide(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to a skipgate YAML config"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """
    Decide whether the rest of the pipeline can be skipped.

    Restores the footprint of the latest run on this workflow and branch,
    compares the commits and sets the ``skip`` output to ``true`` only when no
    file the previous run depended on has changed.

    Example:
        skipgate decide
        skipgate decide --config ci/skipgate.yaml --verbose
    """
    with _actions_logging(verbose):
        env = RunEnvironment.from_env()
        try:
            settings = _load(config)
            store = get_cache_store(config=settings)
            engine = _build_engine(settings, env, store)
            decision = asyncio.run(_decide(engine, store, env.identity()))
        except Exception as exc:
            logger.error(f"Pipeline failed: {exc}")
            _emit_skip("false", env)
            raise typer.Exit(code=1)

        _emit_skip(decision.output_value, env)
        if decision.skip:
            logger.info("Skipping workflow run")
        else:
            logger.info(f"Running workflow: {decision.reason}")
        if decision.failed:
            logger.error(f"Pipeline failed: {decision.reason}")
            raise typer.Exit(code=1)


@app.command("finalize")
def finalize(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to a skipgate YAML config"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """
    Record the files this run depended on for the next invocation.

    Writes the footprint file and saves it in the cache under the
    ``workflow-branch-commit`` key. A failed save is logged but never fails
    the pipeline.

    Example:
        skipgate finalize
    """
    with _actions_logging(verbose):
        env = RunEnvironment.from_env()
        try:
            settings = _load(config)
            store = get_cache_store(config=settings)
            stage = FinalizeStage(
                store,
                strategy=get_footprint_strategy(settings),
                footprint_file=settings.footprint.path,
                timeout=settings.timeout,
            )
            result = asyncio.run(_finalize(stage, store, env.identity()))
        except Exception as exc:
            logger.warning(f"Footprint not recorded: {exc}")
            return

        if result.registered:
            typer.echo(f"Recorded {len(result.files)} files under {result.key}")


@cache_app.command("list")
def cache_list(
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to a skipgate YAML config"
    ),
) -> None:
    """
    List cached footprints, newest first.

    Example:
        skipgate cache list
        # Output: ci-refs/heads/main-abc123    2024-01-01 10:00:00+00:00    3 files
    """
    store = get_cache_store(config=_load(config))

    async def _list():
        try:
            return await store.list_entries()
        finally:
            await store.disconnect()

    entries = asyncio.run(_list())
    if not entries:
        typer.echo("No cache entries found")
        return
    for entry in entries:
        files = sum(
            len([line for line in content.split("\n") if line])
            for content in entry.files.values()
        )
        typer.echo(f"{entry.key}\t{entry.created_at}\t{files} files")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
