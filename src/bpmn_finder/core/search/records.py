"""Build match records, labels and process names for search hits."""

import itertools
import json
from typing import Any

from bpmn_finder.config import UNNAMED_CALL_ACTIVITY, UNNAMED_PROCESS, UNNAMED_TASK
from bpmn_finder.core.tree.tags import attribute, find_child
from bpmn_finder.core.tree.walker import as_list
from bpmn_finder.models.match import Document, ElementKind, Match, Result, TreeNode

# Prefixes for generated ids, one per element kind.
PLACEHOLDER_PREFIXES: dict[ElementKind, str] = {
    ElementKind.SCRIPT: "script",
    ElementKind.SCRIPT_TASK: "script_task",
    ElementKind.CALL_ACTIVITY: "call_activity",
    ElementKind.CONDITION_EXPRESSION: "condition_expression",
}


class PlaceholderIds:
    """Hand out ``<prefix>_<n>`` ids for elements without an id attribute.

    One instance lives for one search run, so repeated runs over the same
    input produce the same ids.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)

    def next(self, kind: ElementKind) -> str:
        return f"{PLACEHOLDER_PREFIXES[kind]}_{next(self._counter)}"

    def element_id(self, node: Any, kind: ElementKind) -> str:
        return attribute(node, "id") or self.next(kind)


def serialize_node(value: Any) -> str:
    """Canonical, order-stable text form of a subtree, attributes included."""
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def resolve_process_name(tree: TreeNode) -> str:
    """Return the declared name of the document's (first) process.

    Looks for ``definitions/process`` under any namespace prefix and falls
    back to a placeholder when either element or the name is missing.
    """
    definitions = find_child(tree, "definitions")
    processes = as_list(find_child(definitions, "process"))
    if not processes:
        return UNNAMED_PROCESS
    return attribute(processes[0], "name") or UNNAMED_PROCESS


def task_name(node: Any) -> str:
    return attribute(node, "name") or UNNAMED_TASK


def call_activity_name(node: Any) -> str:
    return attribute(node, "name") or UNNAMED_CALL_ACTIVITY


def reference_label(called_element: str) -> str:
    return f"CallActivity - calledElement: {called_element}"


def script_label() -> str:
    return "Script content match"


def script_task_label(task: Any) -> str:
    return f"Script Task - {task_name(task)}"


def call_activity_label(activity: Any) -> str:
    return f"Call Activity - {call_activity_name(activity)}"


def call_activity_field_label(activity: Any, tag: str, value: str) -> str:
    return f"Call Activity ({call_activity_name(activity)}) - {tag}: {value}"


def condition_parent_name(flow: Any) -> str | None:
    """Name of the element guarding a condition: its name, else ``source -> target``."""
    name = attribute(flow, "name")
    if name:
        return name
    source, target = attribute(flow, "sourceRef"), attribute(flow, "targetRef")
    if source and target:
        return f"{source} -> {target}"
    return None


def condition_label(parent_name: str | None) -> str:
    if parent_name:
        return f"Condition Expression ({parent_name})"
    return "Condition Expression"


def build_result(document: Document, process_name: str, match: Match) -> Result:
    """Wrap a single match with its document context, ready for grouping."""
    return Result(
        folder_path=document.folder_path,
        file_name=document.file_name,
        content=document.content,
        process_name=process_name,
        matches=(match,),
    )
