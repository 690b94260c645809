"""Collect process-definition files from a directory tree."""

from pathlib import Path, PurePosixPath

from loguru import logger

from bpmn_finder.config import ACCEPTED_EXTENSIONS, EXCLUDED_SEGMENT
from bpmn_finder.models.match import SourceFile


def is_searchable_path(relative_path: str) -> bool:
    """True for accepted extensions outside any archival (``old``) folder."""
    path = PurePosixPath(relative_path)
    if path.suffix.lower() not in ACCEPTED_EXTENSIONS:
        return False
    return not any(part.lower() == EXCLUDED_SEGMENT for part in path.parts[:-1])


def load_source_dir(source_dir: Path) -> list[SourceFile]:
    """Read every searchable file below ``source_dir``, sorted by path.

    Paths are reported relative to the parent of ``source_dir``, so the chosen
    folder's own name is the first segment (``processes/billing/invoice.bpmn``).

    Raises:
        FileNotFoundError: If ``source_dir`` is not a directory.
    """
    if not source_dir.is_dir():
        msg = f"Source directory not found: {source_dir}"
        raise FileNotFoundError(msg)

    root_name = source_dir.resolve().name
    sources: list[SourceFile] = []
    skipped = 0
    for file_path in sorted(p for p in source_dir.rglob("*") if p.is_file()):
        inner = file_path.relative_to(source_dir).as_posix()
        if not is_searchable_path(inner):
            skipped += 1
            continue
        relative = f"{root_name}/{inner}" if root_name else inner
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping {}: {}", relative, exc)
            skipped += 1
            continue
        sources.append(SourceFile(path=relative, content=content))

    logger.debug("Loaded {} files from {} ({} skipped)", len(sources), source_dir, skipped)
    return sources
