"""Configuration constants for bpmn-finder."""

import os
from pathlib import Path

# File extensions picked up by the loader: native BPMN files and generic XML.
ACCEPTED_EXTENSIONS: tuple[str, ...] = (".bpmn", ".xml")

# Any path segment with this name (case-insensitive) marks an archival copy.
EXCLUDED_SEGMENT: str = "old"

RESULTS_PER_PAGE: int = 10
MAX_RESULTS_PER_PAGE: int = 50

# Fallback labels when an element has no name attribute.
UNNAMED_PROCESS: str = "Unnamed Process"
UNNAMED_TASK: str = "Unnamed Task"
UNNAMED_CALL_ACTIVITY: str = "Unnamed Call Activity"

SOURCE_DIR_ENV: str = "BPMN_FINDER_SOURCE_DIR"


def resolve_source_directory() -> Path:
    """Return the directory to scan: $BPMN_FINDER_SOURCE_DIR or the working directory."""
    env_dir = os.environ.get(SOURCE_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.cwd()
