"""Group per-match results into one result per document and process."""

from collections.abc import Iterable

from bpmn_finder.models.match import ElementKind, Match, Result

# Marker classes understood by the diagram viewer.
FLOW_MARKER = "highlight-flow"
SHAPE_MARKER = "highlight"


def group_results(results: Iterable[Result]) -> list[Result]:
    """Merge results sharing (folder, file, process name), keeping first-seen order.

    Scalar fields come from the first member of each group; matches are
    concatenated in the order they were found. Grouping already grouped
    results returns them unchanged.
    """
    groups: dict[tuple[str, str, str], list[Result]] = {}
    for result in results:
        groups.setdefault(result.group_key, []).append(result)

    grouped: list[Result] = []
    for members in groups.values():
        first = members[0]
        matches: tuple[Match, ...] = tuple(m for member in members for m in member.matches)
        grouped.append(
            Result(
                folder_path=first.folder_path,
                file_name=first.file_name,
                content=first.content,
                process_name=first.process_name,
                matches=matches,
            )
        )
    return grouped


def highlight_targets(result: Result) -> dict[str, str]:
    """Map each matched element id to the marker a viewer should apply.

    Condition expressions highlight their sequence flow; everything else
    highlights the shape. The first match for an id decides its marker.
    """
    targets: dict[str, str] = {}
    for match in result.matches:
        if not match.element_id or match.element_id in targets:
            continue
        is_flow = match.element_kind == ElementKind.CONDITION_EXPRESSION
        targets[match.element_id] = FLOW_MARKER if is_flow else SHAPE_MARKER
    return targets
