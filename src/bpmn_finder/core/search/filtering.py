"""Narrow and page grouped search results."""

from collections.abc import Sequence

from bpmn_finder.config import MAX_RESULTS_PER_PAGE, RESULTS_PER_PAGE
from bpmn_finder.models.match import Result


def filter_results(results: Sequence[Result], filter_text: str) -> list[Result]:
    """Keep results whose folder path, file name or process name contains ``filter_text``.

    Matching is case-insensitive and ignores surrounding whitespace in the
    filter. An empty filter keeps everything, in the same order.
    """
    term = filter_text.strip().lower()
    if not term:
        return list(results)
    return [
        r
        for r in results
        if term in r.folder_path.lower()
        or term in r.file_name.lower()
        or term in r.process_name.lower()
    ]


def clamp_window(limit: int, offset: int) -> tuple[int, int]:
    """Bound a requested page to 1..MAX_RESULTS_PER_PAGE results from offset >= 0."""
    return max(1, min(limit, MAX_RESULTS_PER_PAGE)), max(0, offset)


def paginate(
    results: Sequence[Result],
    *,
    limit: int = RESULTS_PER_PAGE,
    offset: int = 0,
) -> tuple[list[Result], int]:
    """Return one page of results and the total count.

    ``limit`` and ``offset`` must already be clamped with ``clamp_window``.
    """
    return list(results[offset : offset + limit]), len(results)
