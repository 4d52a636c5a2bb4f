"""Render log records as GitHub Actions workflow commands."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsFormatter(logging.Formatter):
    """Prefix warnings and errors so the runner shows them as annotations."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info and record.exc_info[1] is not None:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{_escape_data(message)}"


@contextmanager
def _actions_logging(verbose: bool = False) -> Iterator[None]:
    """Send skipgate logs to stdout in workflow command format for a command."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ActionsFormatter())
    logger = logging.getLogger("skipgate")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    try:
        yield
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
