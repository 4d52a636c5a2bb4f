"""Helpers for exposing step outputs to the invoking pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def _format_output(name: str, value: str) -> str:
    if "\n" in value or "\r" in value:
        raise ValueError(f"Output {name} must be a single line")
    return f"{name}={value}\n"


def _set_output(name: str, value: str, output_path: Optional[str]) -> bool:
    """Append ``name=value`` to the runner's output file.

    Returns ``False`` when no output file is configured or it cannot be
    written, so the caller can fall back to printing the value.
    """
    line = _format_output(name, value)
    if not output_path:
        return False
    try:
        with Path(output_path).open("a", encoding="utf-8") as f:
            f.write(line)
    except OSError as exc:
        logger.warning(f"Cannot write output {name} to {output_path}: {exc}")
        return False
    return True
