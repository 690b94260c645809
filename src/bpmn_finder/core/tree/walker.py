"""Depth-first traversal over parsed XML trees."""

from collections.abc import Callable
from typing import Any

from bpmn_finder.core.tree.tags import local_name
from bpmn_finder.models.match import TreeNode

# visitor(normalized_key, raw_key, value, containing_node)
Visitor = Callable[[str, str, Any, TreeNode], None]


def as_list(value: Any) -> list[Any]:
    """Normalize a single-or-repeated element to a list; absent values become []."""
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v is not None]
    return [value]


def walk(node: Any, visitor: Visitor) -> None:
    """Visit every key of ``node``, then recurse into nested nodes in document order.

    The visitor sees each key before the walker descends into its value, so a
    detector on a parent element always runs before detectors on its children.
    Scalars and malformed values are skipped.
    """
    if not isinstance(node, dict):
        return

    for raw_key, value in node.items():
        visitor(local_name(raw_key), raw_key, value, node)

    for value in node.values():
        if isinstance(value, dict):
            walk(value, visitor)
        elif isinstance(value, list):
            for item in value:
                walk(item, visitor)


def iter_scalars(node: Any, key: str = "") -> list[tuple[str, str]]:
    """Collect (tag, value) for every scalar inside ``node``, depth-first.

    Scalars inside a list of repeated elements are reported under the list's key.
    """
    found: list[tuple[str, str]] = []
    if isinstance(node, dict):
        for child_key, value in node.items():
            found.extend(iter_scalars(value, child_key))
    elif isinstance(node, list):
        for item in node:
            found.extend(iter_scalars(item, key))
    elif node is not None:
        found.append((key, str(node)))
    return found
