"""Logging configuration for the BPMN finder."""

import sys
from typing import Any, TextIO

from loguru import logger

# Modules whose per-document and per-run chatter is hidden unless verbose.
ENGINE_MODULE = "bpmn_finder.core"


def _quiet_engine(record: dict[str, Any]) -> bool:
    if not record["name"].startswith(ENGINE_MODULE):
        return True
    return record["level"].no >= logger.level("WARNING").no


def configure_logging(*, verbose: bool = False, sink: TextIO | None = None) -> None:
    """Route loguru to stderr (or ``sink``).

    Verbose mode logs everything at DEBUG, tagged with the emitting module.
    Otherwise hosts log at INFO and the search engine only reports skipped
    files and errors.
    """
    logger.remove()
    target = sink if sink is not None else sys.stderr
    if verbose:
        logger.add(target, level="DEBUG", format="{level.icon} {name}: {message}")
    else:
        logger.add(target, level="INFO", format="{level.icon} {message}", filter=_quiet_engine)
