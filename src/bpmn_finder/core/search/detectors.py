"""Per-element-kind matching rules.

Each detector is a pure function of ``(tag, value, containing_node)`` plus the
query and the run's placeholder ids. ``tag`` is the namespace-free key being
visited, ``value`` its raw value (a single element or a list of repeated
elements) and ``containing_node`` the element that owns the key. Detectors
return the matches they found, possibly none.
"""

from typing import Any

from bpmn_finder.core.search.records import (
    PlaceholderIds,
    call_activity_field_label,
    call_activity_label,
    condition_label,
    condition_parent_name,
    reference_label,
    script_label,
    script_task_label,
    serialize_node,
)
from bpmn_finder.core.tree.tags import contains_text, find_child, text_content
from bpmn_finder.core.tree.walker import as_list, iter_scalars
from bpmn_finder.models.match import ElementKind, Match, TreeNode


def detect_call_reference(
    tag: str,
    value: Any,
    containing_node: TreeNode,
    *,
    process_id: str,
    ids: PlaceholderIds,
) -> list[Match]:
    """Call activities whose ``calledElement`` equals ``process_id`` exactly."""
    if tag != ElementKind.CALL_ACTIVITY:
        return []

    matches: list[Match] = []
    for activity in as_list(value):
        if not isinstance(activity, dict):
            continue
        called = activity.get("@_calledElement")
        if called != process_id:
            continue
        matches.append(
            Match(
                element_id=ids.element_id(activity, ElementKind.CALL_ACTIVITY),
                element_kind=ElementKind.CALL_ACTIVITY,
                label=reference_label(process_id),
                matched_text=called,
            )
        )
    return matches


def detect_script(
    tag: str,
    value: Any,
    containing_node: TreeNode,
    *,
    query: str,
    ids: PlaceholderIds,
) -> list[Match]:
    """Script text anywhere in the tree, attributed to the element holding it."""
    if tag != ElementKind.SCRIPT:
        return []

    matches: list[Match] = []
    for script in as_list(value):
        content = text_content(script)
        if content is None or not contains_text(content, query):
            continue
        matches.append(
            Match(
                element_id=ids.element_id(containing_node, ElementKind.SCRIPT),
                element_kind=ElementKind.SCRIPT,
                label=script_label(),
                matched_text=content,
            )
        )
    return matches


def detect_script_tasks(
    tag: str,
    value: Any,
    containing_node: TreeNode,
    *,
    query: str,
    ids: PlaceholderIds,
) -> list[Match]:
    """Script tasks whose nested script (or any of several) contains the query."""
    if tag != ElementKind.SCRIPT_TASK:
        return []

    matches: list[Match] = []
    for task in as_list(value):
        task_id: str | None = None
        for script in as_list(find_child(task, "script")):
            content = text_content(script)
            if content is None or not contains_text(content, query):
                continue
            if task_id is None:
                task_id = ids.element_id(task, ElementKind.SCRIPT_TASK)
            matches.append(
                Match(
                    element_id=task_id,
                    element_kind=ElementKind.SCRIPT_TASK,
                    label=script_task_label(task),
                    matched_text=content,
                )
            )
    return matches


def detect_call_activities(
    tag: str,
    value: Any,
    containing_node: TreeNode,
    *,
    query: str,
    ids: PlaceholderIds,
) -> list[Match]:
    """Call activities whose serialized subtree, or any single value inside, contains the query.

    A whole-activity hit yields one match; in addition every attribute or child
    value that contains the query yields its own match. All of them carry the
    activity's id so they highlight the same shape.
    """
    if tag != ElementKind.CALL_ACTIVITY:
        return []

    matches: list[Match] = []
    for activity in as_list(value):
        if not isinstance(activity, dict):
            continue

        hits: list[tuple[str, str]] = []
        serialized = serialize_node(activity)
        if contains_text(serialized, query):
            hits.append((call_activity_label(activity), serialized))
        for field_tag, field_value in iter_scalars(activity):
            if contains_text(field_value, query):
                label = call_activity_field_label(activity, field_tag, field_value)
                hits.append((label, field_value))
        if not hits:
            continue

        element_id = ids.element_id(activity, ElementKind.CALL_ACTIVITY)
        matches.extend(
            Match(
                element_id=element_id,
                element_kind=ElementKind.CALL_ACTIVITY,
                label=label,
                matched_text=text,
            )
            for label, text in hits
        )
    return matches


def detect_condition_expressions(
    tag: str,
    value: Any,
    containing_node: TreeNode,
    *,
    query: str,
    ids: PlaceholderIds,
) -> list[Match]:
    """Condition expressions, attributed to the sequence flow that owns them."""
    if tag != ElementKind.CONDITION_EXPRESSION:
        return []

    matches: list[Match] = []
    for expression in as_list(value):
        content = text_content(expression)
        if content is None:
            content = serialize_node(expression)
        if not contains_text(content, query):
            continue
        matches.append(
            Match(
                element_id=ids.element_id(containing_node, ElementKind.CONDITION_EXPRESSION),
                element_kind=ElementKind.CONDITION_EXPRESSION,
                label=condition_label(condition_parent_name(containing_node)),
                matched_text=content,
            )
        )
    return matches
